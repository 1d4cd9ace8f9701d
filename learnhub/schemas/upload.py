from learnhub.schemas.base import APISchema

class UploadedFile(APISchema):
    url: str
    filename: str
    size: int
    mimetype: str

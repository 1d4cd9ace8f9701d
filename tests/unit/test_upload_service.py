import pytest

from learnhub.core.config import settings
from learnhub.core.exceptions import NotFound, ValidationFailed
from learnhub.services.upload import UploadService, build_stored_name


def test_stored_name_keeps_lowercased_extension():
    name = build_stored_name("Holiday Photo.JPEG")
    assert name.startswith("file-")
    assert name.endswith(".jpeg")
    assert " " not in name


@pytest.mark.parametrize("filename,content_type", [
    ("notes.pdf", "image/png"),
    ("archive", "image/png"),
    ("photo.png", "application/octet-stream"),
    ("photo.png", "image/svg+xml"),
    ("photo.png", None),
])
def test_validate_rejects(filename, content_type):
    with pytest.raises(ValidationFailed):
        UploadService().validate(filename, content_type, 10)


def test_validate_enforces_size(monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 100)
    service = UploadService()
    service.validate("ok.png", "image/png", 100)
    with pytest.raises(ValidationFailed):
        service.validate("ok.png", "image/png", 101)


def test_save_and_delete(tmp_path):
    service = UploadService(upload_dir=str(tmp_path))
    stored = service.save(data=b"gif-bytes", filename="anim.gif", content_type="image/gif")

    assert (tmp_path / stored.filename).read_bytes() == b"gif-bytes"
    service.delete(stored.filename)
    assert not (tmp_path / stored.filename).exists()
    with pytest.raises(NotFound):
        service.delete(stored.filename)


@pytest.mark.parametrize("filename", ["", "..", "../etc/passwd", "a\\b.png"])
def test_delete_rejects_unsafe_names(tmp_path, filename):
    with pytest.raises(ValidationFailed):
        UploadService(upload_dir=str(tmp_path)).delete(filename)

from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "LearnHub API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    # Database Configuration
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: Optional[str] = None
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None

    DATABASE_URL: str = ""

    def __init__(self, **data):
        super().__init__(**data)
        if not self.DATABASE_URL:
            if self.DATABASE_HOST and self.DATABASE_NAME:
                self.DATABASE_URL = (
                    f'postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}'
                    f'@{self.DATABASE_HOST}:{self.DATABASE_PORT or "5432"}/{self.DATABASE_NAME}'
                )
            else:
                self.DATABASE_URL = "sqlite:///./learnhub.db"

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5MB

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_DIR: str = "logs"

    # Seed
    FIRST_ADMIN_EMAIL: Optional[str] = None
    FIRST_ADMIN_PASSWORD: Optional[str] = None
    FIRST_ADMIN_NAME: str = "Administrator"

    class Config:
        env_file = ".env"

settings = Settings()

import os
from typing import List, Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Explicitly load .env file before defining Settings
env_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env")
load_dotenv(env_path)

class Settings(BaseSettings):
    PROJECT_NAME: str = "Secure File Share"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Backend table
    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./fileshare.db"

    # Backend object store
    STORAGE_DIR: str = os.path.join(os.getcwd(), "storage")
    STORAGE_BUCKET: str = "files"

    # Public origin used when composing download links. Falls back to the request origin.
    SITE_URL: Optional[str] = None

    # Captcha
    CAPTCHA_SALT: str = "YOUR_SALT_HERE"
    CAPTCHA_EXPIRE_SECONDS: int = 300
    CAPTCHA_LENGTH: int = 5
    CAPTCHA_WIDTH: int = 150
    CAPTCHA_HEIGHT: int = 50

    # Upload rules
    MAX_FILE_SIZE: int = 100 * 1024 * 1024
    # Comma separated string in env, parsed to list.
    DISALLOWED_EXTENSIONS_STR: str = ".exe"

    DEFAULT_DOWNLOAD_LIMIT: int = 1
    MAX_DOWNLOAD_LIMIT: int = 10
    DEFAULT_EXPIRY_HOURS: int = 24
    MAX_EXPIRY_HOURS: int = 168

    FINAL_DOWNLOAD_REDIRECT_SECONDS: int = 3

    @property
    def DISALLOWED_EXTENSIONS(self) -> List[str]:
        # Handle potential quote wrapping from env file parsing
        raw_str = self.DISALLOWED_EXTENSIONS_STR.strip('"\'')
        extensions = []
        for ext in raw_str.split(","):
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = "." + ext
            extensions.append(ext)
        return extensions

    @property
    def BUCKET_PATH(self) -> str:
        return os.path.join(self.STORAGE_DIR, self.STORAGE_BUCKET)

    class Config:
        case_sensitive = True

settings = Settings()

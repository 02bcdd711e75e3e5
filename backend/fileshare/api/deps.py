from typing import Generator

from fileshare.db.session import SessionLocal
from fileshare.storage.bucket import Bucket
from fileshare.storage.client import files_bucket


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_bucket() -> Bucket:
    return files_bucket

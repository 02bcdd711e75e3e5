import io
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from fileshare import crud, schemas
from fileshare.api.deps import get_bucket, get_db
from fileshare.db.base import Base
from fileshare.main import app
from fileshare.storage import Bucket
from fileshare.utils.captcha import VerificationStore

DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(DATABASE_URL,
                       connect_args={
                           "check_same_thread": False,
                       },
                       poolclass=StaticPool)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    database = TestingSessionLocal()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture(autouse=True)
def setup_and_teardown():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    VerificationStore.clear()


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def bucket(tmp_path):
    return Bucket("files", str(tmp_path / "files"))


@pytest.fixture
def client(bucket):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_bucket] = lambda: bucket
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def verified_captcha(client):
    def solve() -> str:
        challenge = client.get("/api/v1/captcha").json()
        code = VerificationStore.get(challenge["id"])["code"]
        response = client.post("/api/v1/captcha/verify", json={
            "id": challenge["id"],
            "code": code,
            "metadata": challenge["metadata"],
        })
        assert response.json() == {"verified": True}
        return challenge["id"]

    return solve


@pytest.fixture
def upload(client, verified_captcha):
    def do_upload(filename="notes.txt", content=b"0123456789", download_limit="", expiry_hours="",
                  content_type="text/plain", captcha_id=None):
        return client.post(
            "/api/v1/files",
            files={"file": (filename, content, content_type)},
            data={
                "download_limit": download_limit,
                "expiry_hours": expiry_hours,
                "captcha_id": captcha_id if captcha_id is not None else verified_captcha(),
            },
        )

    return do_upload


@pytest.fixture
def make_record(db, bucket):
    def create(share_id="a" * 32, download_limit=1, download_count=0, expires_in=timedelta(hours=1),
               content=b"hello", store_blob=True):
        storage_path = f"{share_id}.txt"
        if store_blob:
            bucket.upload(storage_path, io.BytesIO(content))
        record = crud.share.create(db, obj_in=schemas.ShareRecordCreate(
            id=share_id,
            filename="hello.txt",
            storage_path=storage_path,
            size=len(content),
            mime_type="text/plain",
            download_limit=download_limit,
            expires_at=datetime.utcnow() + expires_in,
        ))
        if download_count:
            record.download_count = download_count
            db.add(record)
            db.commit()
        return record

    return create

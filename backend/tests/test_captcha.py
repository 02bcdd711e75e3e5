import base64
import io
from datetime import datetime, timedelta

from PIL import Image

from fileshare.core.config import settings
from fileshare.utils.captcha import CAPTCHA_ALPHABET, VerificationStore, generate_captcha_image


def test_get_captcha_returns_png_challenge(client):
    response = client.get("/api/v1/captcha")
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["captcha"].startswith("data:image/png;base64,")
    assert set(data["metadata"]) == {"t", "n", "s"}
    assert VerificationStore.get(data["id"]) is not None


def test_verify_captcha_wrong_code(client):
    challenge = client.get("/api/v1/captcha").json()
    response = client.post("/api/v1/captcha/verify", json={
        "id": challenge["id"],
        "code": "wrong!",
        "metadata": challenge["metadata"],
    })
    assert response.json() == {"verified": False}


def test_verify_captcha_is_case_insensitive(client):
    challenge = client.get("/api/v1/captcha").json()
    code = VerificationStore.get(challenge["id"])["code"]
    response = client.post("/api/v1/captcha/verify", json={
        "id": challenge["id"],
        "code": code.lower(),
        "metadata": challenge["metadata"],
    })
    assert response.json() == {"verified": True}


def test_verify_captcha_rejects_tampered_signature(client):
    challenge = client.get("/api/v1/captcha").json()
    code = VerificationStore.get(challenge["id"])["code"]
    metadata = dict(challenge["metadata"], s="0" * 64)
    response = client.post("/api/v1/captcha/verify", json={
        "id": challenge["id"],
        "code": code,
        "metadata": metadata,
    })
    assert response.json() == {"verified": False}


def test_verified_challenge_reports_verified(verified_captcha):
    v_id = verified_captcha()
    assert VerificationStore.is_verified(v_id) is True


def test_unverified_challenge_is_not_verified(client):
    challenge = client.get("/api/v1/captcha").json()
    assert VerificationStore.is_verified(challenge["id"]) is False


def test_expired_challenges_are_pruned_on_add():
    VerificationStore.add("old", "ABCDE", expires_in=60)
    VerificationStore._store["old"]["timestamp"] = datetime.utcnow() - timedelta(seconds=61)

    VerificationStore.add("new", "FGHJK")

    assert "old" not in VerificationStore._store
    assert "new" in VerificationStore._store


def test_unanswered_challenges_do_not_accumulate(client):
    for _ in range(5):
        client.get("/api/v1/captcha")
    for entry in VerificationStore._store.values():
        entry["timestamp"] -= timedelta(seconds=settings.CAPTCHA_EXPIRE_SECONDS + 1)

    client.get("/api/v1/captcha")
    assert len(VerificationStore._store) == 1


def test_generate_captcha_image_uses_requested_length():
    code, img_base64 = generate_captcha_image(length=4)
    assert len(code) == 4
    assert all(char in CAPTCHA_ALPHABET for char in code)

    img = Image.open(io.BytesIO(base64.b64decode(img_base64)))
    assert img.format == "PNG"
    assert img.size == (settings.CAPTCHA_WIDTH, settings.CAPTCHA_HEIGHT)


def test_generate_captcha_image_default_length():
    code, _ = generate_captcha_image()
    assert len(code) == settings.CAPTCHA_LENGTH

import time
import uuid

from fastapi import APIRouter

from fileshare import schemas
from fileshare.core.config import settings
from fileshare.utils.captcha import VerificationStore, generate_captcha_image, generate_server_sign

router = APIRouter()


@router.get("", response_model=schemas.CaptchaChallenge)
def get_captcha():
    code, img_base64 = generate_captcha_image()
    v_id = str(uuid.uuid4())
    VerificationStore.add(v_id, code)

    timestamp = int(time.time())
    nonce = uuid.uuid4().hex[:8]
    server_sign = generate_server_sign(v_id, timestamp, nonce)

    return {
        "id": v_id,
        "captcha": "data:image/png;base64," + img_base64,
        "metadata": {
            "t": timestamp,
            "n": nonce,
            "s": server_sign
        }
    }


@router.post("/verify", response_model=schemas.CaptchaVerifyResult)
def verify_captcha(req: schemas.CaptchaVerifyRequest):
    """
    Check the answer to a challenge. A solved challenge can then be spent on one upload.
    """
    if int(time.time()) - req.metadata.t > settings.CAPTCHA_EXPIRE_SECONDS:
        return {"verified": False}

    expected_sign = generate_server_sign(req.id, req.metadata.t, req.metadata.n)
    if expected_sign != req.metadata.s:
        return {"verified": False}

    return {"verified": VerificationStore.verify(req.id, req.code)}

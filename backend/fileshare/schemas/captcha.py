from pydantic import BaseModel

class CaptchaMetadata(BaseModel):
    t: int
    n: str
    s: str

class CaptchaChallenge(BaseModel):
    id: str
    captcha: str # data URL of the PNG image
    metadata: CaptchaMetadata

class CaptchaVerifyRequest(BaseModel):
    id: str
    code: str
    metadata: CaptchaMetadata

class CaptchaVerifyResult(BaseModel):
    verified: bool

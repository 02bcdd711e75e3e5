from .share import ShareRecordCreate, ShareInfo, UploadResult
from .captcha import CaptchaMetadata, CaptchaChallenge, CaptchaVerifyRequest, CaptchaVerifyResult

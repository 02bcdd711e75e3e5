from fastapi import APIRouter

from fileshare.api.api_v1.endpoints import captcha, files

api_router = APIRouter()
api_router.include_router(captcha.router, prefix="/captcha", tags=["captcha"])
api_router.include_router(files.router, prefix="/files", tags=["files"])

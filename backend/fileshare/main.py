import logging
import os

import uvicorn
from fastapi import FastAPI, Response
from fastapi.staticfiles import StaticFiles

from fileshare.api.api_v1.api import api_router
from fileshare.core.config import settings
from fileshare.core.errors import setup_exception_handlers
from fileshare.db.init_db import init_db
from fileshare.web import pages

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

if settings.CAPTCHA_SALT == "YOUR_SALT_HERE":
    logger.warning("CAPTCHA_SALT is not set. Please check your environment variables.")

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

setup_exception_handlers(app)

app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(pages.router)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)


@app.on_event("startup")
async def startup_event():
    init_db()
    logger.debug("Registered Routes:")
    for route in app.routes:
        if hasattr(route, "path"):
            logger.debug("  %s", route.path)


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class UploadRejected(Exception):
    """File refused before anything is written to the backend."""

    def __init__(self, title: str, description: str, status_code: int = 400):
        super().__init__(description)
        self.title = title
        self.description = description
        self.status_code = status_code


class ShareUnavailable(Exception):
    """The share record is missing, expired or out of downloads."""

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message

    @property
    def status_code(self) -> int:
        return 404 if self.reason == "not_found" else 410


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the FastAPI app."""

    @app.exception_handler(UploadRejected)
    async def upload_rejected_handler(request: Request, exc: UploadRejected):
        logger.info("Upload rejected: %s (%s)", exc.title, exc.description)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.title, "detail": exc.description},
        )

    @app.exception_handler(ShareUnavailable)
    async def share_unavailable_handler(request: Request, exc: ShareUnavailable):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "reason": exc.reason},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation Error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content={"message": "Validation Error", "detail": exc.errors()},
        )

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"message": "Internal Server Error"},
        )

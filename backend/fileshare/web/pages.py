import os

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from fileshare import crud
from fileshare.api import deps
from fileshare.core.config import settings
from fileshare.utils import share_utils

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["plural"] = share_utils.pluralize

router = APIRouter()


def _page_context(title: str) -> dict:
    return {
        "project_name": settings.PROJECT_NAME,
        "title": title,
        "api_prefix": settings.API_V1_STR,
    }


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    context = _page_context(settings.PROJECT_NAME)
    context.update({
        "max_file_size": settings.MAX_FILE_SIZE,
        "disallowed_extensions": settings.DISALLOWED_EXTENSIONS,
        "default_download_limit": settings.DEFAULT_DOWNLOAD_LIMIT,
        "max_download_limit": settings.MAX_DOWNLOAD_LIMIT,
        "default_expiry_hours": settings.DEFAULT_EXPIRY_HOURS,
        "max_expiry_hours": settings.MAX_EXPIRY_HOURS,
    })
    return templates.TemplateResponse(request, "index.html", context)


@router.get("/about", response_class=HTMLResponse)
def about(request: Request):
    return templates.TemplateResponse(request, "about.html", _page_context(f"About - {settings.PROJECT_NAME}"))


@router.get("/download/{share_id}", response_class=HTMLResponse)
def download_page(request: Request, share_id: str, db: Session = Depends(deps.get_db)):
    record = crud.share.get(db, id=share_id)
    status = share_utils.evaluate_access(record)

    context = _page_context(f"Download File - {settings.PROJECT_NAME}")
    context["status"] = status.value
    if status is share_utils.AccessStatus.AVAILABLE:
        context["file"] = share_utils.build_share_info(record)
        context["redirect_seconds"] = settings.FINAL_DOWNLOAD_REDIRECT_SECONDS
    else:
        context["error"] = share_utils.ACCESS_MESSAGES[status]
    return templates.TemplateResponse(request, "download.html", context)

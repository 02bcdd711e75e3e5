import enum
import math
import re
import secrets
from datetime import datetime, timedelta
from typing import Optional

from fileshare.core.config import settings
from fileshare.core.errors import ShareUnavailable, UploadRejected
from fileshare.models.share import ShareRecord


class AccessStatus(str, enum.Enum):
    AVAILABLE = "available"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    LIMIT_REACHED = "limit_reached"


ACCESS_MESSAGES = {
    AccessStatus.NOT_FOUND: "File not found or link has expired.",
    AccessStatus.EXPIRED: "This download link has expired.",
    AccessStatus.LIMIT_REACHED: "This download link has reached its maximum number of downloads.",
}


def utcnow() -> datetime:
    return datetime.utcnow()


def generate_share_id() -> str:
    return secrets.token_bytes(16).hex()


def get_extension(filename: str) -> str:
    """Lower-cased extension including the dot, or "" when the name has none."""
    dot = filename.rfind(".")
    if dot == -1:
        return ""
    return filename[dot:].lower()


def storage_key_for(share_id: str, filename: str) -> str:
    # Only the last path component counts. A name without a dot contributes
    # the whole name as its extension.
    basename = re.split(r"[\\/]", filename)[-1]
    return f"{share_id}.{basename.rsplit('.', 1)[-1]}"


def validate_upload(filename: str, size: int) -> None:
    if size > settings.MAX_FILE_SIZE:
        raise UploadRejected(
            "File too large",
            f"Maximum file size is {settings.MAX_FILE_SIZE // (1024 * 1024)}MB",
            status_code=413,
        )
    ext = get_extension(filename)
    if ext and ext in settings.DISALLOWED_EXTENSIONS:
        raise UploadRejected("File type not allowed", f"{ext} files are not permitted")


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_leading_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw))
    if not match:
        return None
    return int(match.group(1))


def _clamp(raw: Optional[str], default: int, upper: int) -> int:
    value = _parse_leading_int(raw)
    if value is None:
        return default
    return min(upper, max(1, value))


def clamp_download_limit(raw: Optional[str]) -> int:
    return _clamp(raw, settings.DEFAULT_DOWNLOAD_LIMIT, settings.MAX_DOWNLOAD_LIMIT)


def clamp_expiry_hours(raw: Optional[str]) -> int:
    return _clamp(raw, settings.DEFAULT_EXPIRY_HOURS, settings.MAX_EXPIRY_HOURS)


def expiry_from_now(hours: int, now: Optional[datetime] = None) -> datetime:
    return (now or utcnow()) + timedelta(hours=hours)


def build_download_url(origin: str, share_id: str) -> str:
    return f"{origin.rstrip('/')}/download/{share_id}"


def evaluate_access(record: Optional[ShareRecord], now: Optional[datetime] = None) -> AccessStatus:
    """
    Decide whether a share can still be downloaded.
    Expiry is checked before the quota, so an expired record reports expired
    whatever its download count.
    """
    if record is None:
        return AccessStatus.NOT_FOUND
    if now is None:
        now = utcnow()
    if now > record.expires_at:
        return AccessStatus.EXPIRED
    if record.download_count >= record.download_limit:
        return AccessStatus.LIMIT_REACHED
    return AccessStatus.AVAILABLE


def pluralize(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    return f"{size / (1024 * 1024 * 1024):.1f} GB"


def format_time_remaining(expires_at: datetime, now: Optional[datetime] = None) -> str:
    if now is None:
        now = utcnow()
    seconds = (expires_at - now).total_seconds()
    hours = math.floor(seconds / 3600)
    if hours < 1:
        return pluralize(math.floor(seconds / 60), "minute")
    return pluralize(hours, "hour")


def require_access(record: Optional[ShareRecord], now: Optional[datetime] = None) -> ShareRecord:
    status = evaluate_access(record, now)
    if status is not AccessStatus.AVAILABLE:
        raise ShareUnavailable(status.value, ACCESS_MESSAGES[status])
    return record


def build_share_info(record: ShareRecord, now: Optional[datetime] = None) -> dict:
    return {
        "id": record.id,
        "filename": record.filename,
        "size": record.size,
        "size_display": format_file_size(record.size),
        "mime_type": record.mime_type,
        "download_limit": record.download_limit,
        "download_count": record.download_count,
        "downloads_remaining": record.downloads_remaining,
        "expires_at": record.expires_at,
        "expires_in": format_time_remaining(record.expires_at, now),
    }

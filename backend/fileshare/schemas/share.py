from typing import Optional
from pydantic import BaseModel
from datetime import datetime

# Shared properties
class ShareRecordBase(BaseModel):
    filename: str
    size: int = 0
    mime_type: Optional[str] = None
    download_limit: int = 1

# Properties to receive on record creation
class ShareRecordCreate(ShareRecordBase):
    id: str
    storage_path: str
    expires_at: datetime

# Public info for the download page (hides the storage key)
class ShareInfo(BaseModel):
    id: str
    filename: str
    size: int
    size_display: str
    mime_type: Optional[str] = None
    download_limit: int
    download_count: int
    downloads_remaining: int
    expires_at: datetime
    expires_in: str

# Returned once the upload has been stored
class UploadResult(BaseModel):
    id: str
    filename: str
    download_url: str
    download_limit: int
    expiry_hours: int
    expires_at: datetime

from fileshare.core.config import settings
from fileshare.storage.bucket import Bucket

files_bucket = Bucket(settings.STORAGE_BUCKET, settings.BUCKET_PATH)

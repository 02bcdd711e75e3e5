from .bucket import Bucket, StorageError, ObjectNotFound

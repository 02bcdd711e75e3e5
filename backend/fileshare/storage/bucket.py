import logging
import os
import shutil
from typing import BinaryIO

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024 # 1MB


class StorageError(Exception):
    pass


class ObjectNotFound(StorageError):
    pass


class Bucket:
    """
    Flat object store backed by a directory. Keys are plain file names.
    """

    def __init__(self, name: str, root: str):
        self.name = name
        self.root = root

    def ensure(self) -> None:
        try:
            os.makedirs(self.root, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create bucket {self.name} at {self.root}: {e}") from e

    def _path(self, key: str) -> str:
        if not key or key in (".", "..") or "/" in key or "\\" in key:
            raise StorageError(f"Invalid object key: {key!r}")
        return os.path.join(self.root, key)

    def exists(self, key: str) -> bool:
        return os.path.isfile(self._path(key))

    def upload(self, key: str, file_obj: BinaryIO) -> int:
        """Write the stream under `key` and return the number of bytes written."""
        path = self._path(key)
        if os.path.exists(path):
            raise StorageError(f"Object {key} already exists in bucket {self.name}")

        self.ensure()
        try:
            with open(path, "wb") as buffer:
                shutil.copyfileobj(file_obj, buffer, CHUNK_SIZE)
        except OSError as e:
            raise StorageError(f"Failed to write object {key}: {e}") from e

        size = os.path.getsize(path)
        logger.debug("Stored %s (%d bytes) in bucket %s", key, size, self.name)
        return size

    def download(self, key: str) -> str:
        """Return the path of the stored object, raising ObjectNotFound when it is missing."""
        path = self._path(key)
        if not os.path.isfile(path):
            raise ObjectNotFound(f"Object {key} not found in bucket {self.name}")
        return path

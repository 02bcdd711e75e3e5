from sqlalchemy import Column, Integer, String, BigInteger, DateTime
from fileshare.db.base_class import Base
from datetime import datetime

class ShareRecord(Base):
    __tablename__ = "files"

    id = Column(String(32), primary_key=True, index=True) # hex of 16 random bytes
    filename = Column(String(255), nullable=False) # display name, not the storage key
    storage_path = Column(String(512), nullable=False)
    size = Column(BigInteger, nullable=False, default=0)
    mime_type = Column(String(255), nullable=True)

    download_limit = Column(Integer, nullable=False, default=1)
    download_count = Column(Integer, nullable=False, default=0)
    expires_at = Column(DateTime, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def downloads_remaining(self) -> int:
        return max(self.download_limit - self.download_count, 0)

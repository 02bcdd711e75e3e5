from sqlalchemy.orm import Session
from fileshare.crud.base import CRUDBase
from fileshare.models.share import ShareRecord
from fileshare.schemas.share import ShareRecordCreate

class CRUDShareRecord(CRUDBase[ShareRecord, ShareRecordCreate]):
    def create(self, db: Session, *, obj_in: ShareRecordCreate) -> ShareRecord:
        db_obj = ShareRecord(
            id=obj_in.id,
            filename=obj_in.filename,
            storage_path=obj_in.storage_path,
            size=obj_in.size,
            mime_type=obj_in.mime_type,
            download_limit=obj_in.download_limit,
            download_count=0,
            expires_at=obj_in.expires_at,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def increment_download(self, db: Session, *, record: ShareRecord) -> ShareRecord:
        # Only download_count is ever updated after insert
        record.download_count += 1
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

share = CRUDShareRecord(ShareRecord)

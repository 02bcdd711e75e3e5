import logging

from fileshare.db.base import Base
from fileshare.db.session import engine
from fileshare.storage.client import files_bucket

logger = logging.getLogger(__name__)


def init_db() -> None:
    # Tables are created directly, there are no migrations
    Base.metadata.create_all(bind=engine)
    files_bucket.ensure()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Creating tables and storage bucket")
    init_db()
    logger.info("Backend initialised")

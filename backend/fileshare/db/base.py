# Import all the models, so that Base has them before being
# imported by Alembic or create_all
from fileshare.db.base_class import Base  # noqa
from fileshare.models.share import ShareRecord  # noqa

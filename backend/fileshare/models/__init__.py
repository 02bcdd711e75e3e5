from .share import ShareRecord

from .crud_share import share

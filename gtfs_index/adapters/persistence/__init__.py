from .local_gtfs_feed_source import LocalGtfsFeedSource
from .local_index_repository import LocalIndexRepository
from .s3_index_repository import S3IndexRepository

__all__ = [
    "LocalGtfsFeedSource",
    "LocalIndexRepository",
    "S3IndexRepository",
]

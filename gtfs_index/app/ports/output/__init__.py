from .feed_source import IFeedSource
from .index_repository import IIndexRepository

__all__ = [
    "IFeedSource",
    "IIndexRepository",
]

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from gtfs_index.app.ports.output import IFeedSource, IIndexRepository
from gtfs_index.app.services.index_handle import FeedIndexHandle
from gtfs_index.domain.models.index import FeedIndex

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexingService:
    """Application service (use case) for building and publishing indices.

    This layer orchestrates ports. Domain stays pure.
    """

    feed_source: IFeedSource
    index_repository: IIndexRepository | None = None
    handle: FeedIndexHandle = field(default_factory=FeedIndexHandle)

    def build(self) -> FeedIndex:
        """Index the source feed, save it if a repository is set, then publish it.

        A failed save raises before publishing, so readers keep the previous
        index.
        """

        feed = self.feed_source.load_feed()
        index = self.handle.build(feed)
        if self.index_repository is not None:
            location = self.index_repository.save(index)
            logger.info("Saved feed index to %s", location)
        self.handle.publish(index)
        return index

    def load_published(self) -> FeedIndex:
        if self.index_repository is None:
            raise RuntimeError("Index repository not configured")

        index = self.index_repository.load()
        self.handle.publish(index)
        return index

    def current(self) -> FeedIndex | None:
        return self.handle.current

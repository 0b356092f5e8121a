from __future__ import annotations

from abc import ABC, abstractmethod

from gtfs_index.domain.models.index import FeedIndex


class IIndexRepository(ABC):
    """Persistence port for built feed indices."""

    @abstractmethod
    def save(self, index: FeedIndex) -> str:
        """Persist the index and return where it was written."""

    @abstractmethod
    def load(self) -> FeedIndex:
        """Load the last saved index."""

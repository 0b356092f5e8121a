from __future__ import annotations

from abc import ABC, abstractmethod

from gtfs_index.domain.models import RawFeed


class IFeedSource(ABC):
    """Port for acquiring the raw rows of a GTFS feed."""

    @abstractmethod
    def load_feed(self) -> RawFeed:
        raise NotImplementedError

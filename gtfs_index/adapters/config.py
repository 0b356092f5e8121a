from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

from gtfs_index.adapters.persistence import (
    LocalGtfsFeedSource,
    LocalIndexRepository,
    S3IndexRepository,
)
from gtfs_index.app.ports.output import IIndexRepository
from gtfs_index.app.services.feed_indexer import FeedIndexer
from gtfs_index.app.services.index_handle import FeedIndexHandle
from gtfs_index.app.services.indexing_service import IndexingService
from gtfs_index.domain.algorithms.key_resolver import (
    CompositeKeyResolver,
    IdentityKeyResolver,
    TripKeyResolver,
)

KeyStrategy = Literal["identity", "composite"]
IndexStore = Literal["local", "s3"]


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True, slots=True)
class IndexerRuntimeConfig:
    """Indexing settings.

    Env vars:
      - GTFS_PATH: feed directory (default: data/gtfs)
      - INDEXER_MAX_WORKERS: projection worker threads (default: 4)
      - TRIP_KEY_STRATEGY: identity|composite (default: identity)
      - INDEX_STORE: local|s3 (default: local)
      - INDEX_PATH: local index file, when INDEX_STORE=local
    """

    gtfs_path: str
    max_workers: int
    trip_key_strategy: KeyStrategy
    index_store: IndexStore
    index_path: str | None

    @staticmethod
    def from_env() -> "IndexerRuntimeConfig":
        strategy = (os.getenv("TRIP_KEY_STRATEGY") or "identity").strip().lower()
        if strategy not in ("identity", "composite"):
            raise RuntimeError(f"Unsupported TRIP_KEY_STRATEGY: {strategy}")

        store = (os.getenv("INDEX_STORE") or "local").strip().lower()
        if store not in ("local", "s3"):
            raise RuntimeError(f"Unsupported INDEX_STORE: {store}")

        return IndexerRuntimeConfig(
            gtfs_path=os.getenv("GTFS_PATH") or "data/gtfs",
            max_workers=max(1, env_int("INDEXER_MAX_WORKERS", 4)),
            trip_key_strategy=strategy,  # type: ignore[arg-type]
            index_store=store,  # type: ignore[arg-type]
            index_path=os.getenv("INDEX_PATH") or None,
        )

    def key_resolver(self) -> TripKeyResolver:
        if self.trip_key_strategy == "composite":
            return CompositeKeyResolver()
        return IdentityKeyResolver()

    def index_repository(self) -> IIndexRepository:
        if self.index_store == "s3":
            return S3IndexRepository()
        return LocalIndexRepository(path=self.index_path)


def build_indexing_service(cfg: IndexerRuntimeConfig) -> IndexingService:
    def _indexer() -> FeedIndexer:
        return FeedIndexer(key_resolver=cfg.key_resolver(), max_workers=cfg.max_workers)

    return IndexingService(
        feed_source=LocalGtfsFeedSource(base_path=cfg.gtfs_path),
        index_repository=cfg.index_repository(),
        handle=FeedIndexHandle(indexer_factory=_indexer),
    )

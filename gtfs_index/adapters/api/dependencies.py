from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException

from gtfs_index.adapters.config import IndexerRuntimeConfig, build_indexing_service
from gtfs_index.app.services.indexing_service import IndexingService
from gtfs_index.domain.models.index import FeedIndex

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_indexing_service() -> IndexingService:
    return build_indexing_service(IndexerRuntimeConfig.from_env())


def get_feed_index(
    service: IndexingService = Depends(get_indexing_service),
) -> FeedIndex:
    index = service.current()
    if index is not None:
        return index

    # First request: load the index saved by the batch build.
    try:
        return service.load_published()
    except Exception as exc:
        logger.warning("Feed index not available: %s", exc)
        raise HTTPException(status_code=503, detail="Feed index not available") from exc

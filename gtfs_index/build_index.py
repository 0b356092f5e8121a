from __future__ import annotations

import logging
import sys

from botocore.exceptions import BotoCoreError, ClientError

from gtfs_index.adapters.config import IndexerRuntimeConfig, build_indexing_service
from gtfs_index.domain.exceptions import IndexingError

logger = logging.getLogger("gtfs_index.build_index")


def main() -> int:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        cfg = IndexerRuntimeConfig.from_env()
        service = build_indexing_service(cfg)
        index = service.build()
    except (IndexingError, OSError, RuntimeError) as exc:
        logger.error("Indexing failed: %s", exc)
        return 1
    except (BotoCoreError, ClientError) as exc:
        logger.error("Saving the feed index failed: %s", exc)
        return 1

    logger.info(
        "Indexed %d trips (%d with spatial data), %d data-quality warnings",
        len(index.schedule.trips),
        len(index.spatial.trip_key_to_projections_table_index),
        len(index.warnings),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

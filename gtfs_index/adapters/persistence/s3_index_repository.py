from __future__ import annotations

import os
from dataclasses import dataclass

from gtfs_index.adapters.aws import s3_client
from gtfs_index.adapters.persistence.local_index_repository import (
    dump_index,
    load_index,
)
from gtfs_index.app.ports.output import IIndexRepository
from gtfs_index.domain.models.index import FeedIndex


@dataclass(slots=True)
class S3IndexRepository(IIndexRepository):
    """Index repository backed by S3.

    Env vars:
      - INDEX_BUCKET: bucket name
      - INDEX_KEY: object key (default: indices/feed_index.pkl.gz)
      - ENDPOINT_URL: preferred LocalStack endpoint (e.g. http://localhost:4566)
      - AWS_REGION: defaults to eu-west-1

    Notes:
      - pickle loading is only safe for trusted inputs.
    """

    bucket: str | None = None
    key: str | None = None

    def _bucket(self) -> str:
        value = self.bucket or os.getenv("INDEX_BUCKET")
        if not value:
            raise RuntimeError("Missing INDEX_BUCKET")
        return value

    def _key(self) -> str:
        return (
            self.key or os.getenv("INDEX_KEY") or "indices/feed_index.pkl.gz"
        ).lstrip("/")

    def save(self, index: FeedIndex) -> str:
        bucket = self._bucket()
        key = self._key()
        s3_client().put_object(Bucket=bucket, Key=key, Body=dump_index(index))
        return f"s3://{bucket}/{key}"

    def load(self) -> FeedIndex:
        obj = s3_client().get_object(Bucket=self._bucket(), Key=self._key())
        return load_index(obj["Body"].read())

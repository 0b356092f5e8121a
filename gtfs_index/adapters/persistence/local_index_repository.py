from __future__ import annotations

import gzip
import os
import pickle
from dataclasses import dataclass
from pathlib import Path

from gtfs_index.app.ports.output import IIndexRepository
from gtfs_index.domain.models.index import FeedIndex


def dump_index(index: FeedIndex) -> bytes:
    return gzip.compress(pickle.dumps(index, protocol=pickle.HIGHEST_PROTOCOL))


def load_index(payload: bytes) -> FeedIndex:
    index = pickle.loads(gzip.decompress(payload))
    if not isinstance(index, FeedIndex):
        raise RuntimeError(f"Payload is not a FeedIndex: {type(index).__name__}")
    return index


@dataclass(slots=True)
class LocalIndexRepository(IIndexRepository):
    """Stores the feed index as a gzip-compressed pickle on disk.

    Env vars:
      - INDEX_PATH: file path (default: data/feed_index.pkl.gz)

    Notes:
      - pickle loading is only safe for trusted inputs.
    """

    path: str | Path | None = None

    def _path(self) -> Path:
        return Path(self.path or os.getenv("INDEX_PATH") or "data/feed_index.pkl.gz")

    def save(self, index: FeedIndex) -> str:
        path = self._path()
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write then rename, so readers never see a partial file.
        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_bytes(dump_index(index))
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        return str(path)

    def load(self) -> FeedIndex:
        path = self._path()
        if not path.exists():
            raise FileNotFoundError(f"No feed index at {path}")
        return load_index(path.read_bytes())

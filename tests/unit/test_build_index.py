from __future__ import annotations

import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from gtfs_index import build_index
from gtfs_index.app.ports.output import IFeedSource, IIndexRepository
from gtfs_index.app.services.indexing_service import IndexingService
from gtfs_index.domain.models import RawFeed
from gtfs_index.domain.models.index import FeedIndex


class _StaticFeedSource(IFeedSource):
    def __init__(self, feed: RawFeed) -> None:
        self.feed = feed

    def load_feed(self) -> RawFeed:
        return self.feed


class _RaisingIndexRepository(IIndexRepository):
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def save(self, index: FeedIndex) -> str:
        raise self.exc

    def load(self) -> FeedIndex:
        raise self.exc


def _use_service(monkeypatch: pytest.MonkeyPatch, service: IndexingService) -> None:
    monkeypatch.setattr(build_index, "build_indexing_service", lambda cfg: service)


def test_main_returns_zero_on_success(monkeypatch: pytest.MonkeyPatch, line_feed: RawFeed) -> None:
    service = IndexingService(feed_source=_StaticFeedSource(line_feed))
    _use_service(monkeypatch, service)

    assert build_index.main() == 0
    assert service.current() is not None


@pytest.mark.parametrize(
    "exc",
    [
        ClientError({"Error": {"Code": "NoSuchBucket", "Message": "missing"}}, "PutObject"),
        NoCredentialsError(),
        OSError("read-only file system"),
    ],
)
def test_main_reports_save_failures_with_exit_code(
    monkeypatch: pytest.MonkeyPatch, line_feed: RawFeed, exc: Exception
) -> None:
    service = IndexingService(
        feed_source=_StaticFeedSource(line_feed),
        index_repository=_RaisingIndexRepository(exc),
    )
    _use_service(monkeypatch, service)

    assert build_index.main() == 1
    assert service.current() is None


def test_main_reports_missing_required_table(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _use_service(monkeypatch, IndexingService(feed_source=_StaticFeedSource(RawFeed())))

    assert build_index.main() == 1


def test_main_reports_bad_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INDEX_STORE", "ftp")

    assert build_index.main() == 1

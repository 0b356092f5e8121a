from __future__ import annotations

import pickle

import pytest

from gtfs_index.domain.algorithms.key_resolver import (
    CompositeKeyResolver,
    IdentityKeyResolver,
    pipe_delimited_key,
)
from gtfs_index.domain.exceptions import KeyResolutionError


def _first_char_key(trip_id: str, direction_id: str | None, start_time: str | None) -> str:
    return trip_id[:1]


def test_identity_resolver_uses_raw_trip_id() -> None:
    resolver = IdentityKeyResolver()

    key = resolver.resolve("T1", "0", "08:00:00")

    assert key == "T1"
    assert resolver.invert(key) == "T1"


def test_composite_resolver_round_trips_to_raw_trip_id() -> None:
    resolver = CompositeKeyResolver()

    k0 = resolver.resolve("T1", "0", "08:00:00")
    k1 = resolver.resolve("T1", "1", "17:00:00")

    assert k0 == "T1|0|08:00:00"
    assert k1 == "T1|1|17:00:00"
    assert resolver.invert(k0) == "T1"
    assert resolver.invert(k1) == "T1"


def test_pipe_delimited_key_leaves_absent_parts_empty() -> None:
    assert pipe_delimited_key("T9", None, None) == "T9||"


def test_custom_composer_still_inverts() -> None:
    resolver = CompositeKeyResolver(compose=lambda t, d, s: f"{s}@{t}")

    key = resolver.resolve("T|with|pipes", "1", "06:00:00")

    assert key == "06:00:00@T|with|pipes"
    assert resolver.invert(key) == "T|with|pipes"


def test_invert_of_unknown_key_raises() -> None:
    resolver = IdentityKeyResolver()
    resolver.resolve("T1")

    with pytest.raises(KeyResolutionError):
        resolver.invert("T2")


def test_composer_collision_between_trip_ids_raises() -> None:
    resolver = CompositeKeyResolver(compose=_first_char_key)
    resolver.resolve("T1")

    with pytest.raises(KeyResolutionError):
        resolver.resolve("T2")

    # Re-resolving the same trip is fine.
    assert resolver.resolve("T1") == "T"


def test_resolver_survives_pickling() -> None:
    resolver = CompositeKeyResolver()
    key = resolver.resolve("T1", "0", "08:00:00")

    restored = pickle.loads(pickle.dumps(resolver))

    assert restored.invert(key) == "T1"
    assert restored.resolve("T2", "1", None) == "T2|1|"


def test_empty_resolver_survives_pickling() -> None:
    restored = pickle.loads(pickle.dumps(IdentityKeyResolver()))

    assert restored.issued_keys() == ()
    assert restored.resolve("T1") == "T1"

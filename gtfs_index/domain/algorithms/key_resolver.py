from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable

from gtfs_index.domain.exceptions import KeyResolutionError

KeyComposer = Callable[[str, "str | None", "str | None"], str]


def pipe_delimited_key(
    trip_id: str, direction_id: str | None, start_time: str | None
) -> str:
    """trip_id|direction|start_time, absent parts left empty."""

    return f"{trip_id}|{direction_id or ''}|{start_time or ''}"


@dataclass(slots=True)
class TripKeyResolver(ABC):
    """Strategy deriving the trip key used throughout the indices.

    Every issued key is remembered, so `invert` recovers the raw trip_id
    whatever the derivation.
    """

    _trip_id_by_key: dict[str, str] = field(default_factory=dict, init=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    @abstractmethod
    def derive(
        self, trip_id: str, direction_id: str | None, start_time: str | None
    ) -> str:
        raise NotImplementedError

    def resolve(
        self,
        trip_id: str,
        direction_id: str | None = None,
        start_time: str | None = None,
    ) -> str:
        key = self.derive(trip_id, direction_id, start_time)
        with self._lock:
            issued = self._trip_id_by_key.setdefault(key, trip_id)
        if issued != trip_id:
            raise KeyResolutionError(
                f"Trip key {key!r} already issued for trip_id {issued!r}, "
                f"cannot reuse it for {trip_id!r}"
            )
        return key

    def invert(self, trip_key: str) -> str:
        try:
            return self._trip_id_by_key[trip_key]
        except KeyError:
            raise KeyResolutionError(f"Unknown trip key: {trip_key!r}") from None

    def issued_keys(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._trip_id_by_key)

    def __getstate__(self) -> dict[str, dict[str, str]]:
        return {"trip_id_by_key": dict(self._trip_id_by_key)}

    def __setstate__(self, state: dict[str, dict[str, str]]) -> None:
        self._trip_id_by_key = dict(state["trip_id_by_key"])
        self._lock = threading.Lock()


@dataclass(slots=True)
class IdentityKeyResolver(TripKeyResolver):
    """The trip key is the raw trip_id."""

    def derive(
        self, trip_id: str, direction_id: str | None, start_time: str | None
    ) -> str:
        return trip_id


@dataclass(slots=True)
class CompositeKeyResolver(TripKeyResolver):
    """Builds keys from trip_id, direction and start time.

    Used when one raw trip_id is shared by several scheduled variants.
    `compose` must be a module-level function for the resolver to pickle.
    """

    compose: KeyComposer = pipe_delimited_key

    def derive(
        self, trip_id: str, direction_id: str | None, start_time: str | None
    ) -> str:
        return self.compose(trip_id, direction_id, start_time)

    def __getstate__(self) -> dict[str, object]:
        return {
            "trip_id_by_key": dict(self._trip_id_by_key),
            "compose": self.compose,
        }

    def __setstate__(self, state: dict[str, object]) -> None:
        self._trip_id_by_key = dict(state["trip_id_by_key"])  # type: ignore[call-overload]
        self._lock = threading.Lock()
        self.compose = state["compose"]  # type: ignore[assignment]

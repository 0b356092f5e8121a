from __future__ import annotations


class IndexingError(Exception):
    """Base exception for feed indexing failures."""


class DataQualityWarning(UserWarning):
    """A recoverable problem in one feed record (duplicate key, bad value...).

    Recorded and logged by the indexer, never raised past the record.
    """

    def __init__(self, table: str, key: str | None, message: str) -> None:
        super().__init__(f"{table}[{key}]: {message}" if key else f"{table}: {message}")
        self.table = table
        self.key = key
        self.message = message

    def __reduce__(self):
        return (type(self), (self.table, self.key, self.message))


class UnknownShapeError(IndexingError, LookupError):
    """Raised when a shape_id has no geometry in the feed."""

    def __init__(self, shape_id: str) -> None:
        super().__init__(f"Unknown shape: {shape_id}")
        self.shape_id = shape_id

    def __reduce__(self):
        return (type(self), (self.shape_id,))


class UnknownStopError(IndexingError, LookupError):
    """Raised when a stop_times row references a stop missing from stops.txt."""

    def __init__(self, stop_id: str) -> None:
        super().__init__(f"Unknown stop: {stop_id}")
        self.stop_id = stop_id

    def __reduce__(self):
        return (type(self), (self.stop_id,))


class KeyResolutionError(IndexingError, KeyError):
    """Raised when a trip key cannot be resolved or inverted."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0]) if self.args else ""


class MissingRequiredTableError(IndexingError):
    """Raised when the feed lacks a table indexing cannot proceed without."""

    def __init__(self, table: str) -> None:
        super().__init__(f"Missing required table: {table}")
        self.table = table

    def __reduce__(self):
        return (type(self), (self.table,))

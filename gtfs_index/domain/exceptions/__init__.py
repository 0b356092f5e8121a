from .indexing import (
    DataQualityWarning,
    IndexingError,
    KeyResolutionError,
    MissingRequiredTableError,
    UnknownShapeError,
    UnknownStopError,
)

__all__ = [
    "DataQualityWarning",
    "IndexingError",
    "KeyResolutionError",
    "MissingRequiredTableError",
    "UnknownShapeError",
    "UnknownStopError",
]

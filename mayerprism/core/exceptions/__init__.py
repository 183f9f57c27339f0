"""Exception handling module."""

from mayerprism.core.exceptions.base import (
    ConfigurationError,
    ExtractionError,
    MayerPrismError,
    NotFoundError,
    PersistenceError,
    PipelineError,
    SentimentFetchError,
)
from mayerprism.core.exceptions.codes import ErrorCode

__all__ = [
    "MayerPrismError",
    "ExtractionError",
    "SentimentFetchError",
    "PersistenceError",
    "PipelineError",
    "ConfigurationError",
    "NotFoundError",
    "ErrorCode",
]

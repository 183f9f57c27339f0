"""Standardised error codes."""

from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举."""

    GENERAL_ERROR = "GENERAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EXTRACTION_ERROR = "EXTRACTION_ERROR"
    SENTIMENT_FETCH_ERROR = "SENTIMENT_FETCH_ERROR"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    PIPELINE_ERROR = "PIPELINE_ERROR"
    NOT_FOUND = "NOT_FOUND"

"""mayerprism核心异常类."""

from typing import Any

from .codes import ErrorCode


class MayerPrismError(Exception):
    """mayerprism基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        return {
            "code": self.error_code,
            "message": self.message,
            "details": dict(self.details),
        }


class ExtractionError(MayerPrismError):
    """The price table could not be rendered or read."""

    def __init__(
        self,
        message: str,
        stage: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["stage"] = stage
        if url is not None:
            super_details["url"] = url
        super().__init__(message, ErrorCode.EXTRACTION_ERROR.value, super_details)
        self.stage = stage
        self.url = url


class SentimentFetchError(MayerPrismError):
    """情绪指数获取失败."""

    def __init__(
        self,
        message: str,
        provider_name: str = "alternative.me",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["provider"] = provider_name
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, ErrorCode.SENTIMENT_FETCH_ERROR.value, super_details)
        self.provider_name = provider_name
        self.status_code = status_code


class PersistenceError(MayerPrismError):
    """存储相关异常."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if operation:
            super_details["operation"] = operation
        super().__init__(message, ErrorCode.PERSISTENCE_ERROR.value, super_details)
        self.operation = operation


class PipelineError(MayerPrismError):
    """Generic acquisition failure surfaced to callers of the pipeline."""

    def __init__(
        self,
        message: str = "Failed to retrieve data",
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if stage:
            super_details["stage"] = stage
        super().__init__(message, ErrorCode.PIPELINE_ERROR.value, super_details)
        self.stage = stage


class ConfigurationError(MayerPrismError):
    """配置错误."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR.value, details)
        self.field = field


class NotFoundError(MayerPrismError):
    """Requested snapshot does not exist."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.NOT_FOUND.value, details)

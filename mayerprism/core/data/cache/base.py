"""缓存策略和接口定义."""

from abc import ABC, abstractmethod
from typing import Any


class CacheStrategy(ABC):
    """缓存策略抽象基类."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """从缓存获取数据."""

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """设置缓存数据."""

    @abstractmethod
    async def clear(self) -> None:
        """清空缓存."""

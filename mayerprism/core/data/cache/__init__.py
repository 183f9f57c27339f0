"""Result caching."""

from mayerprism.core.data.cache.base import CacheStrategy
from mayerprism.core.data.cache.memory import DEFAULT_TTL_SECONDS, ResultCache
from mayerprism.core.data.cache.single_flight import SingleFlight

__all__ = ["CacheStrategy", "ResultCache", "SingleFlight", "DEFAULT_TTL_SECONDS"]

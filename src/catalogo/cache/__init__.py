"""Cache - Read-through cache shared by the catalog services."""

from catalogo.cache.coordinator import CacheCoordinator
from catalogo.cache.models import ALL, CacheRegion, CacheStats

__all__ = [
    "ALL",
    "CacheCoordinator",
    "CacheRegion",
    "CacheStats",
]

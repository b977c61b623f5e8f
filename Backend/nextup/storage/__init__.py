"""
Storage package: repository protocols plus memory and SQL implementations.
"""

from .base import BookingRepository, CatalogRepository, ShopRepository, Store
from .memory import MemoryStore
from .sql import SqlStore, scoped_select

__all__ = [
    "ShopRepository",
    "CatalogRepository",
    "BookingRepository",
    "Store",
    "MemoryStore",
    "SqlStore",
    "scoped_select",
]

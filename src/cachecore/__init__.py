"""
cachecore: cache item value object with lazy hydration, expiration and tags.
"""

from cachecore.cache.item import CacheItem
from cachecore.cache.pool import ArrayCachePool
from cachecore.cache.taggable import TagSet, decode_tagged_key, encode_tagged_key
from cachecore.exceptions import (
    CacheError,
    ContractViolationError,
    InvalidArgumentError,
)

__version__ = "0.1.0"

__all__ = [
    "ArrayCachePool",
    "CacheError",
    "CacheItem",
    "ContractViolationError",
    "InvalidArgumentError",
    "TagSet",
    "__version__",
    "decode_tagged_key",
    "encode_tagged_key",
]

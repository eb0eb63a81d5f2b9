"""
Cache package.

This package provides:
- Item (item.py): CacheItem with lazy hydration and expiration
- Tags (taggable.py): tagged-key codec and TagSet
- Pool (pool.py): in-memory ArrayCachePool
- Interfaces (base.py): abstract item and pool contracts
"""

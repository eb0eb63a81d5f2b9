"""
Base classes for caching.

This module defines:
- HasExpirationDate: items that can report their absolute expiration
- CacheItemInterface: the item contract the pool and callers rely on
- CachePoolInterface: the pool contract that creates and persists items
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Iterable


class HasExpirationDate(ABC):
    """Interface for items exposing their expiration instant."""

    @abstractmethod
    def get_expiration_date(self) -> datetime | None:
        """Return the expiration instant, or None if the item never expires."""
        ...


class CacheItemInterface(ABC):
    """Abstract interface for cache items."""

    @abstractmethod
    def get_key(self) -> str:
        """Return the key of this item."""
        ...

    @abstractmethod
    def get(self) -> Any:
        """Return the value, or None on a miss."""
        ...

    @abstractmethod
    def is_hit(self) -> bool:
        """Check whether the lookup resulted in a usable value."""
        ...

    @abstractmethod
    def set(self, value: Any) -> CacheItemInterface:
        """Set the value held by this item."""
        ...

    @abstractmethod
    def expires_at(self, expiration: datetime | None) -> CacheItemInterface:
        """Set an absolute expiration instant."""
        ...

    @abstractmethod
    def expires_after(self, time: int | timedelta | None) -> CacheItemInterface:
        """Set expiration relative to now."""
        ...


class CachePoolInterface(ABC):
    """Abstract interface for pools that create and persist cache items."""

    @abstractmethod
    def get_item(self, key: str) -> CacheItemInterface:
        """Return the item for a key. Never raises on a miss."""
        ...

    @abstractmethod
    def get_items(self, keys: Iterable[str]) -> dict[str, CacheItemInterface]:
        """Return items for several keys."""
        ...

    @abstractmethod
    def has_item(self, key: str) -> bool:
        """Check if a key holds a live value."""
        ...

    @abstractmethod
    def clear(self) -> bool:
        """Delete every item in the pool."""
        ...

    @abstractmethod
    def delete_item(self, key: str) -> bool:
        """Delete a single item."""
        ...

    @abstractmethod
    def delete_items(self, keys: Iterable[str]) -> bool:
        """Delete several items."""
        ...

    @abstractmethod
    def save(self, item: CacheItemInterface) -> bool:
        """Persist an item immediately."""
        ...

    @abstractmethod
    def save_deferred(self, item: CacheItemInterface) -> bool:
        """Queue an item to be persisted on commit()."""
        ...

    @abstractmethod
    def commit(self) -> bool:
        """Persist all deferred items."""
        ...

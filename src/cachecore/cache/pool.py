"""
In-memory cache pool.

ArrayCachePool keeps records in a process-local dict and hands out
CacheItem instances whose presence is a deferred producer, so the record is
only read if the caller asks whether it is a hit. On save, the pool uses
get_expiration_has_changed() to decide between keeping the stored
expiration and writing the item's.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterable

from cachecore.cache.base import CacheItemInterface, CachePoolInterface
from cachecore.cache.item import CacheItem
from cachecore.cache.taggable import decode_tagged_key
from cachecore.config import get_settings
from cachecore.exceptions import InvalidArgumentError
from cachecore.logging import get_logger, log_context
from cachecore.types import Clock, LoadResult, utc_now

logger = get_logger(__name__)


@dataclass
class StoredRecord:
    """A persisted value with its expiration and tags."""

    value: Any
    expiration_date: datetime | None = None
    tags: list[str] = field(default_factory=list)


class ArrayCachePool(CachePoolInterface):
    """Dict-backed cache pool.

    Not thread-safe. Intended for tests and for single-process use.
    """

    def __init__(
        self,
        name: str = "array",
        default_ttl_seconds: int | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize ArrayCachePool.

        Args:
            name: Pool name, attached to log records.
            default_ttl_seconds: TTL for new records saved without an
                explicit expiration. Falls back to settings when None.
            clock: Returns the current instant; shared with created items.
        """
        self.name = name
        if default_ttl_seconds is None:
            default_ttl_seconds = get_settings().DEFAULT_TTL_SECONDS
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._records: dict[str, StoredRecord] = {}
        self._deferred: dict[str, CacheItem] = {}

    def get_item(self, key: str) -> CacheItem:
        plain_key, _ = decode_tagged_key(key)
        if plain_key in self._deferred:
            return self._deferred[plain_key]

        def producer() -> LoadResult:
            return self._fetch(plain_key, item)

        item = CacheItem(key, producer, clock=self._clock)
        record = self._records.get(plain_key)
        if record is not None:
            item.tags.update(record.tags)
        return item

    def get_items(self, keys: Iterable[str]) -> dict[str, CacheItem]:
        items: dict[str, CacheItem] = {}
        for key in keys:
            item = self.get_item(key)
            items[item.get_key()] = item
        return items

    def has_item(self, key: str) -> bool:
        return self.get_item(key).is_hit()

    def clear(self) -> bool:
        with log_context(pool=self.name, operation="clear"):
            logger.debug("Clearing pool", records=len(self._records))
            self._records.clear()
            self._deferred.clear()
        return True

    def delete_item(self, key: str) -> bool:
        plain_key, _ = decode_tagged_key(key)
        with log_context(pool=self.name, operation="delete"):
            removed = self._records.pop(plain_key, None) is not None
            self._deferred.pop(plain_key, None)
            logger.debug("Deleted item", key=plain_key, existed=removed)
        return True

    def delete_items(self, keys: Iterable[str]) -> bool:
        for key in keys:
            self.delete_item(key)
        return True

    def save(self, item: CacheItemInterface) -> bool:
        if not isinstance(item, CacheItem):
            raise InvalidArgumentError(
                "ArrayCachePool can only save CacheItem instances",
                context={"argument": "item", "type": type(item).__name__},
            )

        key = item.get_key()
        with log_context(pool=self.name, operation="save"):
            if not item.is_hit():
                self._records.pop(key, None)
                logger.debug("Item is not a hit, removed", key=key)
                return False

            expiration = self._resolve_expiration(item)
            self._records[key] = StoredRecord(
                value=item.get(),
                expiration_date=expiration,
                tags=item.get_tags(),
            )
            logger.debug("Saved item", key=key, expiration_date=expiration)
        return True

    def save_deferred(self, item: CacheItemInterface) -> bool:
        if not isinstance(item, CacheItem):
            raise InvalidArgumentError(
                "ArrayCachePool can only save CacheItem instances",
                context={"argument": "item", "type": type(item).__name__},
            )
        self._deferred[item.get_key()] = item
        return True

    def commit(self) -> bool:
        with log_context(pool=self.name, operation="commit"):
            logger.debug("Committing deferred items", count=len(self._deferred))
            results: list[bool] = []
            first_error: Exception | None = None
            for key, item in list(self._deferred.items()):
                try:
                    results.append(self.save(item))
                except Exception as e:
                    # Failed items stay queued; the rest are still saved
                    logger.debug("Deferred save failed", key=key, exc_info=True)
                    if first_error is None:
                        first_error = e
                    continue
                self._deferred.pop(key, None)

            if first_error is not None:
                raise first_error
        return all(results)

    def get_record(self, key: str) -> StoredRecord | None:
        """Return the raw stored record for a plain key, if any."""
        return self._records.get(key)

    def _resolve_expiration(self, item: CacheItem) -> datetime | None:
        """Pick the expiration to store for an item.

        An explicitly changed expiration always wins. Otherwise the stored
        record's expiration is kept, then the item's own expiration, and the
        default TTL only applies when neither exists.
        """
        if item.get_expiration_has_changed():
            return item.get_expiration_date()

        existing = self._records.get(item.get_key())
        if existing is not None:
            return existing.expiration_date

        expiration = item.get_expiration_date()
        if expiration is None and self.default_ttl_seconds is not None:
            return self._clock() + timedelta(seconds=self.default_ttl_seconds)
        return expiration

    def _fetch(self, key: str, item: CacheItem) -> LoadResult:
        with log_context(pool=self.name, operation="fetch"):
            record = self._records.get(key)
            if record is None:
                logger.debug("Cache miss", key=key)
                return False, None, None

            current = CacheItem(key, True, record.value, record.expiration_date, clock=self._clock)
            if not current.is_hit():
                del self._records[key]
                logger.debug("Evicted expired record", key=key)
                return False, None, None

            item.tags.update(record.tags)
            logger.debug("Cache hit", key=key)
            return True, record.value, record.expiration_date

"""
CacheItem: the value object exchanged between a cache pool and its callers.

An item is created by a pool for a single lookup or write. It can be loaded
eagerly (has_value=True plus a value) or lazily by passing a zero-argument
producer as has_value. The producer returns a
(has_value, value, expiration_date) triple and is invoked at most once, the
first time is_hit(), get() or get_expiration_date() needs real state.

Presence is tri-state and always compared by identity:
- False: no value
- True: value set
- callable: deferred, not yet resolved
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from cachecore.cache.base import CacheItemInterface, HasExpirationDate
from cachecore.cache.taggable import TagSet, decode_tagged_key, encode_tagged_key
from cachecore.exceptions import ContractViolationError, InvalidArgumentError
from cachecore.logging import get_logger
from cachecore.types import Clock, LoadResult, Producer, utc_now

logger = get_logger(__name__)


class CacheItem(CacheItemInterface, HasExpirationDate):
    """A cache entry with lazy hydration, expiration and tags.

    Not designed for concurrent mutation. Hydration alone is guarded by a
    per-instance lock so that several readers never invoke the producer
    twice.
    """

    def __init__(
        self,
        key: str,
        has_value: bool | Producer = False,
        value: Any = None,
        expiration_date: datetime | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize CacheItem.

        Args:
            key: Raw key, optionally carrying a "(tagA,tagB)" suffix.
            has_value: True/False, or a producer for deferred loading.
            value: The value, kept only when has_value is True.
            expiration_date: Absolute expiration, None for never.
            clock: Returns the current instant.

        Raises:
            InvalidArgumentError: If key is not a string or carries an
                invalid tag.
        """
        plain_key, tags = decode_tagged_key(key)
        self._key = plain_key
        self._tags = TagSet(tags)
        self._clock = clock
        self._lock = threading.Lock()

        self._value: Any = None
        self._has_value: bool | Producer = False
        self._expiration_date: datetime | None = None
        self._expiration_has_changed = False

        self._load(has_value, value, expiration_date)

    @property
    def key(self) -> str:
        return self._key

    def get_key(self) -> str:
        return self._key

    def set(self, value: Any) -> CacheItem:
        """Set the value and mark the item present.

        A pending producer is dropped and will never be invoked.
        """
        self._value = value
        self._has_value = True
        return self

    def get(self) -> Any:
        """Return the value, or None on a miss.

        Use is_hit() to tell a stored None apart from a miss.
        """
        if not self.is_hit():
            return None
        return self._value

    def is_hit(self) -> bool:
        self._initialize()

        if self._has_value is not True:
            return False

        if self._expiration_date is None:
            return True

        # Inclusive: still a hit exactly at the expiration instant
        return self._now_for(self._expiration_date) <= self._expiration_date

    def get_expiration_date(self) -> datetime | None:
        self._initialize()
        return self._expiration_date

    def expires_at(self, expiration: datetime | None) -> CacheItem:
        """Set an absolute expiration instant (None means never).

        Does not trigger hydration.

        Raises:
            InvalidArgumentError: If expiration is not a datetime or None.
        """
        if expiration is not None and not isinstance(expiration, datetime):
            raise InvalidArgumentError(
                "expires_at() expects a datetime or None",
                context={"argument": "expiration", "type": type(expiration).__name__},
            )

        self._expiration_has_changed = True
        self._expiration_date = expiration
        return self

    def expires_after(self, time: int | timedelta | None) -> CacheItem:
        """Set expiration relative to now.

        Args:
            time: None for never, a timedelta, or a whole number of seconds.

        Raises:
            InvalidArgumentError: For any other kind of input. The item is
                left untouched in that case.
        """
        if time is None:
            expiration = None
        elif isinstance(time, timedelta):
            expiration = self._clock() + time
        elif isinstance(time, int) and not isinstance(time, bool):
            expiration = self._clock() + timedelta(seconds=time)
        else:
            raise InvalidArgumentError(
                "expires_after() expects None, an int number of seconds or a timedelta",
                context={"argument": "time", "type": type(time).__name__},
            )

        self._expiration_has_changed = True
        self._expiration_date = expiration
        return self

    def get_expiration_has_changed(self) -> bool:
        """Whether a caller explicitly set the expiration on this item."""
        return self._expiration_has_changed

    # Tags

    @property
    def tags(self) -> TagSet:
        return self._tags

    def get_tags(self) -> list[str]:
        return self._tags.to_list()

    def set_tags(self, tags: Iterable[str]) -> CacheItem:
        self._tags.replace(tags)
        return self

    def add_tag(self, tag: str) -> CacheItem:
        self._tags.add(tag)
        return self

    def get_tagged_key(self) -> str:
        return encode_tagged_key(self._key, self._tags)

    # Internals

    def _load(
        self,
        has_value: bool | Producer,
        value: Any,
        expiration_date: datetime | None,
    ) -> None:
        """Store presence, value and expiration.

        Not a plain verbatim store: once a caller has changed the
        expiration, a later hydration keeps it instead of taking the
        producer's expiration.
        """
        self._has_value = has_value
        if not self._expiration_has_changed:
            self._expiration_date = expiration_date

        if has_value is True:
            self._value = value

    def _initialize(self) -> None:
        """Resolve a deferred producer into concrete state, once."""
        if not callable(self._has_value):
            return

        with self._lock:
            producer = self._has_value
            if not callable(producer):
                return

            logger.debug("Hydrating cache item", key=self._key)
            try:
                loaded = self._check_result(producer())
            except Exception:
                # The producer is dropped: the item settles as a miss
                self._has_value = False
                logger.debug("Hydration failed", key=self._key, exc_info=True)
                raise

            self._load(*loaded)

    def _check_result(self, result: Any) -> LoadResult:
        if not isinstance(result, (tuple, list)) or len(result) != 3:
            raise ContractViolationError(
                "Producer must return a (has_value, value, expiration_date) triple",
                context={"key": self._key, "reason": f"got {type(result).__name__}"},
            )

        has_value, value, expiration_date = result
        if not isinstance(has_value, bool):
            raise ContractViolationError(
                "Producer returned a non-boolean has_value",
                context={"key": self._key, "reason": type(has_value).__name__},
            )
        if expiration_date is not None and not isinstance(expiration_date, datetime):
            raise ContractViolationError(
                "Producer returned an invalid expiration_date",
                context={"key": self._key, "reason": type(expiration_date).__name__},
            )

        return has_value, value, expiration_date

    def _now_for(self, expiration: datetime) -> datetime:
        now = self._clock()
        if expiration.tzinfo is None and now.tzinfo is not None:
            return now.astimezone().replace(tzinfo=None)
        if expiration.tzinfo is not None and now.tzinfo is None:
            return now.astimezone(timezone.utc)
        return now

    def __repr__(self) -> str:
        if callable(self._has_value):
            state = "deferred"
        else:
            state = "present" if self._has_value is True else "absent"
        return (
            f"CacheItem(key={self._key!r}, state={state}, "
            f"expiration_date={self._expiration_date!r})"
        )

"""
Shared types for cachecore.

- LoadResult: the (has_value, value, expiration) triple a producer returns
- Producer: zero-argument callable used for deferred hydration
- utc_now(): timezone-aware current time, the default item clock
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Tuple, Union

LoadResult = Tuple[bool, Any, Union[datetime, None]]
Producer = Callable[[], LoadResult]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Get current UTC time with timezone info."""
    return datetime.now(timezone.utc)

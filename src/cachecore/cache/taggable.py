"""
Tag support for cache items.

Tags travel inside the raw key as a parenthesised suffix:

    "profile:42(users,profiles)"  ->  ("profile:42", {"users", "profiles"})

The item decodes the suffix once, at construction, and keeps the tags in a
TagSet alongside the plain key.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from cachecore.exceptions import InvalidArgumentError

_RESERVED = frozenset("(),")


def decode_tagged_key(raw: str) -> tuple[str, frozenset[str]]:
    """Split a raw key into its plain key and tag set.

    Args:
        raw: Key that may end with a "(tagA,tagB)" suffix.

    Returns:
        Tuple of (plain key, tags). Keys without a suffix have no tags.

    Raises:
        InvalidArgumentError: If raw is not a string or its tag suffix is
            malformed.
    """
    if not isinstance(raw, str):
        raise InvalidArgumentError(
            "Cache key must be a string",
            context={"argument": "key", "type": type(raw).__name__},
        )
    if not raw.endswith(")") or "(" not in raw:
        return raw, frozenset()

    key, _, tag_part = raw[:-1].rpartition("(")
    if ")" in tag_part:
        raise InvalidArgumentError(
            "Malformed tag suffix in cache key",
            context={"argument": "key", "key": raw},
        )
    tags = frozenset(t.strip() for t in tag_part.split(",") if t.strip())
    return key, tags


def encode_tagged_key(key: str, tags: Iterable[str]) -> str:
    """Build the raw key for a plain key and its tags (sorted)."""
    ordered = sorted(tags)
    if not ordered:
        return key
    return f"{key}({','.join(ordered)})"


def validate_tag(tag: str) -> str:
    if not isinstance(tag, str) or not tag.strip():
        raise InvalidArgumentError(
            "Tag must be a non-empty string",
            context={"argument": "tag", "type": type(tag).__name__},
        )
    tag = tag.strip()
    if _RESERVED.intersection(tag):
        raise InvalidArgumentError(
            "Tag contains a reserved character",
            context={"argument": "tag", "tag": tag, "reserved": "(),"},
        )
    return tag


class TagSet:
    """Mutable set of validated tags attached to a cache key."""

    def __init__(self, tags: Iterable[str] = ()) -> None:
        self._tags: set[str] = set()
        self.update(tags)

    def add(self, tag: str) -> None:
        self._tags.add(validate_tag(tag))

    def update(self, tags: Iterable[str]) -> None:
        validated = [validate_tag(t) for t in tags]
        self._tags.update(validated)

    def replace(self, tags: Iterable[str]) -> None:
        """Replace all tags. Nothing changes if any tag is invalid."""
        validated = {validate_tag(t) for t in tags}
        self._tags = validated

    def discard(self, tag: str) -> None:
        self._tags.discard(tag)

    def to_list(self) -> list[str]:
        return sorted(self._tags)

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._tags)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagSet):
            return self._tags == other._tags
        if isinstance(other, (set, frozenset)):
            return self._tags == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"TagSet({self.to_list()!r})"

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import date, datetime, timezone

from .nodes import Node


def coerce_datetime(value) -> datetime | None:
    """Turn a front-matter date into a naive datetime, or None."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            return coerce_datetime(datetime.fromisoformat(value.strip()))
        except ValueError:
            return None
    return None


class PostCollection(Sequence[Node]):
    """Lightweight helper for working with lists of BlogPost nodes."""

    def __init__(self, posts: Iterable[Node]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PostCollection(self._posts[item])
        return self._posts[item]

    def by_id(self, node_id: str | None) -> Node | None:
        for post in self._posts:
            if post.id == node_id:
                return post
        return None

    def of_type(self, post_type: str) -> PostCollection:
        return PostCollection(p for p in self._posts if p.get("type") == post_type)

    def excluding_types(self, types: Iterable[str]) -> PostCollection:
        excluded = set(types)
        return PostCollection(p for p in self._posts if p.get("type") not in excluded)

    def with_tag(self, tag: str) -> PostCollection:
        return PostCollection(p for p in self._posts if tag in (p.get("tags") or []))

    def sorted(
        self, fields: Sequence[str] = ("date", "title"), reverse: bool = True
    ) -> PostCollection:
        """Sort posts by the given fields.

        Dates compare chronologically whatever their front-matter form, and
        posts without a usable date sort after dated ones when ``reverse`` is
        True (the default, newest first).

        Args:
            fields: Field names in priority order.
            reverse: If True, newest/highest first.

        Returns:
            A new PostCollection with sorted posts.
        """

        def sort_key(post: Node):
            key = []
            for name in fields:
                value = post.get(name)
                if name == "date":
                    moment = coerce_datetime(value)
                    key.append((moment is not None, moment or datetime.min))
                else:
                    key.append((value is not None, "" if value is None else str(value)))
            return tuple(key)

        return PostCollection(sorted(self._posts, key=sort_key, reverse=reverse))

    def paginate(self, skip: int, limit: int) -> PostCollection:
        return PostCollection(self._posts[skip : skip + limit])

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"

import asyncio
from typing import Awaitable, Callable, Iterator

from loguru import logger


class CategoryCache:
    """Append-only mapping of category name to the ids carrying it.

    Entries are never evicted or rewritten for the lifetime of the session, so
    memory is bounded by the number of categories. Concurrent lookups of the same
    uncached category share a single fetch.
    """

    def __init__(self):
        self._entries: dict[str, tuple[int, ...]] = {}
        self._pending: dict[str, asyncio.Future] = {}

    def __contains__(self, category: str) -> bool:
        return category in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, category: str) -> tuple[int, ...] | None:
        return self._entries.get(category)

    def put(self, category: str, ids: list[int]) -> tuple[int, ...]:
        """Store ids for a category unless it is already cached; return the cached ids."""
        if category not in self._entries:
            self._entries[category] = tuple(ids)
        return self._entries[category]

    async def resolve(self, category: str, fetch: Callable[[str], Awaitable[list[int]]]) -> tuple[int, ...]:
        """Return cached ids for a category, fetching and caching them on first use."""
        cached = self.get(category)
        if cached is not None:
            return cached

        pending = self._pending.get(category)
        if pending is None:
            logger.debug(f"Category '{category}' not cached, fetching")
            pending = asyncio.ensure_future(fetch(category))
            self._pending[category] = pending
            pending.add_done_callback(lambda _: self._pending.pop(category, None))

        ids = await asyncio.shield(pending)
        return self.put(category, ids)

"""
Creature List Service - incremental loading and reconciliation of the creature list.

The service owns the DisplayState rendered by the list view. Every change of the
filter configuration starts a new generation: the displayed list is emptied, the
offset returns to zero and the first page of the new generation is requested.
Responses issued under an older generation are dropped when they arrive.

Without an active filter pages come from the remote list endpoint. With a search
text or category selection, candidate ids are computed locally from the bootstrap
index (see FilterEngine) and detail records are fetched one id at a time.
"""

import asyncio
from typing import Awaitable, Callable, Protocol

from loguru import logger

from dexranger.gateways.errors import DexError, NotFoundError
from dexranger.gateways.pokeapi import PokeAPI
from dexranger.models import DetailRecord, DisplayState, IndexEntry, Page
from dexranger.services.filters import FilterEngine, normalize_search_text, toggle_category

DEFAULT_PAGE_SIZE = 50

StateListener = Callable[[DisplayState], None]


class CreatureSource(Protocol):
    """Data source consumed by the service; PokeAPI is the production implementation."""

    def fetch_all_index(self) -> Awaitable[list[IndexEntry]]: ...

    def fetch_page(self, limit: int, offset: int) -> Awaitable[Page]: ...

    def fetch_ids_by_category(self, name: str) -> Awaitable[list[int]]: ...

    def fetch_detail(self, creature_id: int) -> Awaitable[DetailRecord]: ...


class CreatureListService:
    """Reconciles paged and filtered creature records into one DisplayState."""

    def __init__(self, source: CreatureSource = PokeAPI, page_size: int = DEFAULT_PAGE_SIZE):
        """
        Initialize the creature list service.

        Args:
            source: Data source implementing the four fetch operations
            page_size: Number of ids requested per page
        """
        self.source = source
        self.limit = page_size
        self.filters = FilterEngine(source.fetch_ids_by_category)
        self.state = DisplayState()
        self.search_text = ""
        self.selected_categories: tuple[str, ...] = ()
        self.bootstrapped = False

        self._bootstrapping = False
        self._candidates: list[int] | None = None
        self._candidates_generation = -1
        self._in_flight: set[int] = set()
        self._listeners: list[StateListener] = []

    # ============= Listeners =============

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    # ============= Public API =============

    @property
    def is_filtered(self) -> bool:
        return FilterEngine.is_active(self.search_text, self.selected_categories)

    async def bootstrap(self) -> None:
        """Fetch the creature index once, then load the first page."""
        if self.bootstrapped or self._bootstrapping:
            return

        self._bootstrapping = True
        self.state.is_loading = True
        self._notify()
        try:
            entries = await self.source.fetch_all_index()
        except DexError as e:
            logger.error(f"Failed to load the creature index: {e}")
            self.state.error = f"Could not load the creature index: {e}"
            return
        finally:
            self._bootstrapping = False
            self.state.is_loading = False
            self._notify()

        self.filters.set_index(entries)
        self.bootstrapped = True
        logger.info(f"Loaded index of {len(entries)} creatures")
        await self._start_generation()

    async def set_search(self, text: str) -> None:
        """Change the search text and restart loading when it differs."""
        normalized = normalize_search_text(text)
        if normalized == self.search_text:
            return

        self.search_text = normalized
        await self._start_generation()

    async def toggle_category(self, name: str) -> None:
        """Select or deselect a category; a third selection replaces the earliest."""
        selection = toggle_category(self.selected_categories, name)
        if selection == self.selected_categories:
            return

        self.selected_categories = selection
        await self._start_generation()

    async def load_more(self) -> None:
        """Fetch and reconcile the next page of the current generation."""
        state = self.state
        generation = state.generation
        if not self.bootstrapped or not state.has_more or generation in self._in_flight:
            return

        self._in_flight.add(generation)
        state.is_loading = True
        self._notify()
        try:
            records, total_count, requested = await self._fetch_page(generation, state.offset)
        except DexError as e:
            if state is self.state:
                logger.error(f"Failed to load creatures at offset {state.offset}: {e}")
                state.error = f"Could not load more creatures: {e}"
            else:
                logger.debug(f"Ignoring failure of stale generation {generation}: {e}")
        else:
            if state is self.state:
                self._reconcile(records, total_count, requested)
            else:
                logger.debug(f"Discarding {len(records)} records from stale generation {generation}")
        finally:
            self._in_flight.discard(generation)
            state.is_loading = False
            if state is self.state:
                self._notify()

    def select_item(self, creature_id: int) -> DetailRecord | None:
        """Surface a displayed record for the detail panel."""
        for record in self.state.items:
            if record.id == creature_id:
                self.state.selected = record
                self._notify()
                return record

        logger.warning(f"Creature {creature_id} is not displayed; selection unchanged")
        return None

    def clear_selection(self) -> None:
        if self.state.selected is not None:
            self.state.selected = None
            self._notify()

    # ============= Generations =============

    def _reset_generation(self) -> None:
        self.state = DisplayState(generation=self.state.generation + 1, selected=self.state.selected)
        self._candidates = None
        logger.info(
            f"Generation {self.state.generation}: search='{self.search_text}' "
            f"categories={list(self.selected_categories)}"
        )
        self._notify()

    async def _start_generation(self) -> None:
        self._reset_generation()
        if not self.bootstrapped:
            return
        await self.load_more()

    # ============= Page fetching =============

    async def _fetch_page(self, generation: int, offset: int) -> tuple[list[DetailRecord], int, int]:
        """Fetch one page; returns the records, the total count and how many ids were requested."""
        if not self.is_filtered:
            page = await self.source.fetch_page(self.limit, offset)
            return page.records, page.total_count, page.requested

        candidates = await self._resolve_candidates(generation)
        batch = candidates[offset : offset + self.limit]
        records = await asyncio.gather(*(self._fetch_detail_or_skip(creature_id) for creature_id in batch))

        return [record for record in records if record is not None], len(candidates), len(batch)

    async def _resolve_candidates(self, generation: int) -> list[int]:
        """Candidate ids of a generation, computed once per generation."""
        if self._candidates is not None and self._candidates_generation == generation:
            return self._candidates

        candidates = await self.filters.candidate_ids(self.search_text, self.selected_categories)
        if generation == self.state.generation:
            self._candidates = candidates
            self._candidates_generation = generation
        return candidates

    async def _fetch_detail_or_skip(self, creature_id: int) -> DetailRecord | None:
        try:
            return await self.source.fetch_detail(creature_id)
        except NotFoundError:
            logger.warning(f"Creature {creature_id} not found, skipping")
            return None

    # ============= Reconciliation =============

    def _reconcile(self, records: list[DetailRecord], total_count: int, requested: int) -> None:
        state = self.state
        if state.total_count is None:
            state.total_count = total_count
        state.error = None

        if requested == 0:
            state.has_more = False
            logger.info(f"Generation {state.generation} exhausted with {len(state.items)} creatures")
            return

        existing = state.item_ids()
        for record in records:
            if record.id not in existing:
                state.items.append(record)
                existing.add(record.id)

        # Offset counts requested ids, not ids kept after dedup
        state.offset += self.limit
        if state.offset >= state.total_count:
            state.has_more = False

        logger.debug(
            f"Generation {state.generation}: {len(state.items)} creatures shown, "
            f"offset={state.offset} total={state.total_count} has_more={state.has_more}"
        )

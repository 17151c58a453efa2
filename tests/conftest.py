"""Shared pytest fixtures.

FakeSource is an in-memory stand-in for the PokeAPI gateway that counts calls and
can hold individual detail fetches behind asyncio events.
"""

import asyncio
from collections import Counter

import pytest

from dexranger.gateways.errors import NotFoundError
from dexranger.gateways.pokeapi import PokeAPI
from dexranger.models import CategorySlot, DetailRecord, IndexEntry, Page


class FakeSource:
    def __init__(self, count: int = 120, names: list[str] | None = None, categories: dict | None = None):
        names = names or [f"creature-{i:03d}" for i in range(1, count + 1)]
        self.entries = [IndexEntry(id=i, name=name) for i, name in enumerate(names, start=1)]
        self.categories = categories or {}
        self.calls = Counter()
        self.missing: set[int] = set()
        self.gates: dict[int, asyncio.Event] = {}
        self.index_error: Exception | None = None
        self.page_error: Exception | None = None
        self.reported_total: int | None = None

    def record(self, entry: IndexEntry) -> DetailRecord:
        slots = tuple(
            CategorySlot(slot=slot, category_name=name)
            for slot, name in enumerate(
                (name for name, ids in self.categories.items() if entry.id in ids),
                start=1,
            )
        )
        return DetailRecord(id=entry.id, name=entry.name, sprite_url=f"https://sprites.test/{entry.id}.png", categories=slots)

    async def fetch_all_index(self) -> list[IndexEntry]:
        self.calls["index"] += 1
        if self.index_error:
            raise self.index_error
        return list(self.entries)

    async def fetch_page(self, limit: int, offset: int) -> Page:
        self.calls["page"] += 1
        if self.page_error:
            raise self.page_error
        entries = self.entries[offset : offset + limit]
        total = self.reported_total if self.reported_total is not None else len(self.entries)
        records = [self.record(entry) for entry in entries if entry.id not in self.missing]
        return Page(records=records, total_count=total, requested=len(entries))

    async def fetch_ids_by_category(self, name: str) -> list[int]:
        self.calls[f"category:{name}"] += 1
        return list(self.categories.get(name, []))

    async def fetch_detail(self, creature_id: int) -> DetailRecord:
        self.calls["detail"] += 1
        gate = self.gates.get(creature_id)
        if gate is not None:
            await gate.wait()
        if creature_id in self.missing:
            raise NotFoundError(f"Resource 'pokemon/{creature_id}' not found")
        return self.record(self.entries[creature_id - 1])


@pytest.fixture
def fake_source():
    """120 creatures named creature-001 .. creature-120."""
    return FakeSource()


@pytest.fixture(autouse=True)
def reset_gateway(monkeypatch):
    """Keep PokeAPI class-level settings from leaking between tests."""
    monkeypatch.setattr(PokeAPI, "_base_url", PokeAPI._base_url)
    monkeypatch.setattr(PokeAPI, "_timeout", PokeAPI._timeout)
    monkeypatch.setattr(PokeAPI, "_max_retries", PokeAPI._max_retries)
    monkeypatch.setattr(PokeAPI, "_retry_backoff", 0)
    monkeypatch.setattr(PokeAPI, "_client", None)
    yield

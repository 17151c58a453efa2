"""Data records shared by the gateway, services and UI."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class IndexEntry:
    """Lightweight id + name record used for local name search."""

    id: int
    name: str


@dataclass(frozen=True)
class CategorySlot:
    slot: int
    category_name: str


@dataclass(frozen=True)
class DetailRecord:
    """Full creature record as shown in the list and the detail panel."""

    id: int
    name: str
    sprite_url: Optional[str] = None
    categories: tuple[CategorySlot, ...] = ()

    @property
    def category_names(self) -> list[str]:
        return [category.category_name for category in sorted(self.categories, key=lambda c: c.slot)]


@dataclass(frozen=True)
class Page:
    """One page from the remote list endpoint.

    requested is the number of entries the list endpoint returned; records may be
    shorter when some details could not be fetched.
    """

    records: list[DetailRecord]
    total_count: int
    requested: int


class LoadPhase(str, Enum):
    LOADING_FIRST_PAGE = "loading_first_page"
    LOADING_MORE = "loading_more"
    IDLE_HAS_MORE = "idle_has_more"
    EXHAUSTED = "exhausted"


@dataclass
class DisplayState:
    """Everything the list view renders for the current filter generation."""

    items: list[DetailRecord] = field(default_factory=list)
    offset: int = 0
    has_more: bool = True
    total_count: Optional[int] = None
    generation: int = 0
    is_loading: bool = False
    error: Optional[str] = None
    selected: Optional[DetailRecord] = None

    @property
    def phase(self) -> LoadPhase:
        if not self.has_more:
            return LoadPhase.EXHAUSTED
        if self.is_loading:
            return LoadPhase.LOADING_FIRST_PAGE if self.offset == 0 else LoadPhase.LOADING_MORE
        return LoadPhase.IDLE_HAS_MORE

    def item_ids(self) -> set[int]:
        return {item.id for item in self.items}

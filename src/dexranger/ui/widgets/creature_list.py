from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Label, ListItem, ListView, LoadingIndicator, Static

from dexranger.models import DetailRecord, DisplayState, LoadPhase
from dexranger.ui.constants import SCROLL_THRESHOLD_ITEMS
from dexranger.ui.utils import capitalize_first_letter, format_category_badges, format_dex_number

EMPTY_MESSAGE = "No creatures found."
END_MESSAGE = "All creatures loaded!"


class CreatureItem(ListItem):
    """Individual creature item widget"""

    def __init__(self, record: DetailRecord):
        super().__init__()
        self.record = record

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Label(format_dex_number(self.record.id), classes="creature-number")
            yield Label(capitalize_first_letter(self.record.name), classes="creature-name")
            yield Label(format_category_badges(self.record.category_names), classes="creature-categories")

    @property
    def creature_id(self) -> int:
        return self.record.id


class CreatureList(Static):
    """Panel listing the creatures of the current filter generation."""

    class CreatureSelected(Message):
        """Message sent when a creature is selected."""

        def __init__(self, creature_id: int) -> None:
            super().__init__()
            self.creature_id = creature_id

    class LoadMoreRequested(Message):
        """Message sent when the cursor gets close to the end of the list."""

    _rendered_generation: int = -1
    _rendered_count: int = 0
    _has_more: bool = True
    _is_loading: bool = False

    def compose(self) -> ComposeResult:
        with Vertical(id="creature-list-container"):
            with Horizontal(id="creature-list-header"):
                yield Label("No.", classes="creature-number-header")
                yield Label("Name", classes="creature-name-header")
                yield Label("Type", classes="creature-categories-header")
            yield ListView(id="creature-list-view")
            yield LoadingIndicator(id="creature-loading")
            yield Static("", id="creature-list-status")

    # Event handlers
    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Handle creature selection"""
        event.stop()
        if isinstance(event.item, CreatureItem):
            self.post_message(self.CreatureSelected(event.item.creature_id))

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        """Request the next page when the cursor nears the bottom."""
        event.stop()
        list_view = event.list_view
        if list_view.index is None or not self._has_more or self._is_loading:
            return
        if list_view.index >= len(list_view.children) - SCROLL_THRESHOLD_ITEMS:
            self.post_message(self.LoadMoreRequested())

    # Public methods
    def update_state(self, state: DisplayState) -> None:
        """Render the display state, appending only records not rendered yet."""
        self._has_more = state.has_more
        self._is_loading = state.is_loading

        try:
            list_view = self.query_one("#creature-list-view", ListView)
        except Exception:
            # Not composed yet
            return

        if state.generation != self._rendered_generation or len(state.items) < self._rendered_count:
            list_view.clear()
            self._rendered_generation = state.generation
            self._rendered_count = 0

        new_records = state.items[self._rendered_count :]
        if new_records:
            list_view.extend(CreatureItem(record) for record in new_records)
            self._rendered_count = len(state.items)
            if list_view.index is None:
                list_view.index = 0

        self._update_loading_state(state)

    def focus_list(self) -> None:
        """Focus the creature list view"""
        try:
            list_view = self.query_one("#creature-list-view", ListView)
            list_view.focus()
            if list_view.index is None and len(list_view.children) > 0:
                list_view.index = 0
        except Exception:
            super().focus()

    # Private methods
    def _update_loading_state(self, state: DisplayState) -> None:
        """Show the spinner while loading and the end or empty message when exhausted"""
        try:
            loading_indicator = self.query_one("#creature-loading", LoadingIndicator)
            status = self.query_one("#creature-list-status", Static)
        except Exception:
            return

        loading_indicator.display = state.is_loading
        if state.phase is LoadPhase.EXHAUSTED:
            status.update(END_MESSAGE if state.items else EMPTY_MESSAGE)
            status.display = True
        else:
            status.update("")
            status.display = False

from loguru import logger
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer

from dexranger.models import DisplayState
from dexranger.services.creature_list import CreatureListService
from dexranger.ui.modals.detail_modal import DetailModal
from dexranger.ui.utils import format_progress_text
from dexranger.ui.widgets.category_filter import CategoryFilter
from dexranger.ui.widgets.creature_list import CreatureList
from dexranger.ui.widgets.search_bar import SearchBar
from dexranger.ui.widgets.title_bar import TitleBar


class MainScreen(Screen):
    """Main screen with the search bar, category filter and creature list."""

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("slash", "focus_search", "Search"),
        Binding("l", "focus_list", "List"),
        Binding("r", "retry", "Retry"),
        Binding("h", "help", "Help", show=False),
    ]

    def __init__(self, service: CreatureListService, api_host: str = "", **kwargs):
        super().__init__(**kwargs)
        self.service = service
        self._api_host = api_host
        self._last_error: str | None = None

    def compose(self) -> ComposeResult:
        """Create the layout for the main screen."""
        with Container(id="main-container"):
            yield TitleBar(api_host=self._api_host, id="title-bar")
            yield SearchBar(id="search-bar")
            yield CategoryFilter(id="category-filter")
            yield CreatureList(id="creature-list")
            yield Footer(id="main-footer", show_command_palette=False)

    def on_mount(self) -> None:
        """Subscribe to the service and load the creature index."""
        self.service.subscribe(self._on_state_changed)
        self._on_state_changed(self.service.state)
        self.run_worker(self.service.bootstrap(), group="bootstrap")

    def on_unmount(self) -> None:
        self.service.unsubscribe(self._on_state_changed)

    # Service state
    def _on_state_changed(self, state: DisplayState) -> None:
        """Push the latest display state into the widgets."""
        self.query_one("#creature-list", CreatureList).update_state(state)
        self.query_one("#category-filter", CategoryFilter).sync_selection(self.service.selected_categories)

        title_bar = self.query_one("#title-bar", TitleBar)
        title_bar.progress_text = format_progress_text(len(state.items), state.total_count)
        title_bar.connection_error = state.error is not None

        if state.error and state.error != self._last_error:
            self.notify(state.error, severity="error")
        self._last_error = state.error

    # Widget messages
    def on_search_bar_search_changed(self, message: SearchBar.SearchChanged) -> None:
        self.run_worker(self.service.set_search(message.text), group="filters")

    def on_category_filter_category_toggled(self, message: CategoryFilter.CategoryToggled) -> None:
        self.run_worker(self.service.toggle_category(message.category), group="filters")

    def on_creature_list_load_more_requested(self, message: CreatureList.LoadMoreRequested) -> None:
        self.run_worker(self.service.load_more(), group="load_more")

    def on_creature_list_creature_selected(self, message: CreatureList.CreatureSelected) -> None:
        """Open the detail panel for the selected creature."""
        record = self.service.select_item(message.creature_id)
        if record is None:
            return

        def on_detail_closed(_result: None) -> None:
            self.service.clear_selection()
            self.call_later(self.action_focus_list)

        self.app.push_screen(DetailModal(record), on_detail_closed)

    # Actions
    def action_focus_search(self) -> None:
        self.query_one("#search-bar", SearchBar).focus_input()

    def action_focus_list(self) -> None:
        self.query_one("#creature-list", CreatureList).focus_list()

    def action_retry(self) -> None:
        """Retry the last failed load"""
        if not self.service.bootstrapped:
            logger.info("Retrying creature index bootstrap")
            self.run_worker(self.service.bootstrap(), group="bootstrap")
        else:
            self.run_worker(self.service.load_more(), group="load_more")

    def action_help(self) -> None:
        """Show help information"""
        self.notify(
            "Help: '/' to search, 'l' for the list, Enter for details, 'r' to retry or load more, 'q' to quit.",
            severity="information",
        )

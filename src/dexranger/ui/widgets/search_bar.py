"""Search bar widget for filtering creatures by name."""

from textual.app import ComposeResult
from textual.message import Message
from textual.timer import Timer
from textual.widgets import Input, Static

from dexranger.ui.constants import FILTER_DEBOUNCE_MS


class SearchBar(Static):
    """Text input that reports the search text once typing pauses."""

    class SearchChanged(Message):
        """Message sent when the search text settles."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    _debounce_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Input(placeholder="Search creatures by name...", id="search-input")

    def on_input_changed(self, event: Input.Changed) -> None:
        """Restart the debounce timer on every keystroke."""
        event.stop()
        if self._debounce_timer is not None:
            self._debounce_timer.stop()
        value = event.value
        self._debounce_timer = self.set_timer(FILTER_DEBOUNCE_MS / 1000, lambda: self._emit(value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Search immediately on Enter."""
        event.stop()
        if self._debounce_timer is not None:
            self._debounce_timer.stop()
            self._debounce_timer = None
        self._emit(event.value)

    def _emit(self, text: str) -> None:
        self._debounce_timer = None
        self.post_message(self.SearchChanged(text))

    def focus_input(self) -> None:
        self.query_one("#search-input", Input).focus()

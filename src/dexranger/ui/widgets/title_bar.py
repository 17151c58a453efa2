from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import Static


class TitleBar(Static):
    """Title bar with the API connection indicator and load progress"""

    connection_error: bool = reactive(False)
    progress_text: str = reactive("")

    def __init__(self, api_host: str = "", **kwargs):
        super().__init__(**kwargs)
        self._api_host = api_host

    def compose(self) -> ComposeResult:
        with Horizontal(id="title-bar-container"):
            yield Static("Creature Dex", id="title")
            with Horizontal(id="status-container"):
                yield Static("", id="progress-info")
                yield Static("●", id="connected-indicator")
                yield Static(f"api: {self._api_host}", id="api-info")

    def watch_connection_error(self, connection_error: bool) -> None:
        """Turn the indicator red while the API is unreachable."""
        try:
            indicator = self.query_one("#connected-indicator", Static)
            indicator.set_class(connection_error, "error")
        except Exception:
            # Not composed yet
            pass

    def watch_progress_text(self, progress_text: str) -> None:
        try:
            self.query_one("#progress-info", Static).update(progress_text)
        except Exception:
            pass

"""Main DexRanger application."""

from urllib.parse import urlparse

from textual.app import App
from textual.binding import Binding

from dexranger.config import DEFAULT_BASE_URL
from dexranger.gateways.pokeapi import PokeAPI
from dexranger.services.creature_list import CreatureListService, CreatureSource
from dexranger.ui.constants import PAGE_SIZE
from dexranger.ui.screens.main_screen import MainScreen


class DexRanger(App):
    """Creature dex terminal UI application."""

    TITLE = "Creature Dex"
    CSS_PATH = "app.tcss"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        page_size: int = PAGE_SIZE,
        request_timeout: float = None,
        max_retries: int = None,
        retry_backoff: float = None,
        theme: str = "textual-dark",
        source: CreatureSource = None,
        **kwargs,
    ):
        """Initialize the DexRanger app.

        Args:
            base_url: Base URL of the creature API.
            page_size: Number of creatures requested per page.
            request_timeout: HTTP timeout in seconds.
            max_retries: Retries for transient network failures.
            retry_backoff: Initial backoff between retries in seconds.
            theme: Textual theme name.
            source: Data source override; defaults to the PokeAPI gateway.
        """
        super().__init__(**kwargs)
        self.base_url = base_url
        self.initial_theme = theme

        # Configure the gateway globally before any request is made
        PokeAPI.set_base_url(base_url)
        PokeAPI.set_timeout(request_timeout)
        PokeAPI.set_retry_policy(max_retries, retry_backoff)

        self.service = CreatureListService(source=source or PokeAPI, page_size=page_size)

    def on_mount(self) -> None:
        """Called when app starts."""
        self.theme = self.initial_theme
        self.push_screen(MainScreen(self.service, api_host=urlparse(self.base_url).netloc))

    async def on_unmount(self) -> None:
        await PokeAPI.close()

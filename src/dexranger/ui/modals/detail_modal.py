"""Detail modal showing a single creature."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

from dexranger.models import DetailRecord
from dexranger.ui.utils import capitalize_first_letter, format_category_badges, format_dex_number


# UI Element IDs
class DetailModalIDs:
    """Constants for UI element IDs."""

    DETAIL_MODAL = "detail-modal"
    MODAL_TITLE = "modal-title"
    FIELDS_CONTAINER = "fields-container"
    CREATURE_ID = "creature-id"
    CREATURE_CATEGORIES = "creature-categories"
    CREATURE_SPRITE = "creature-sprite"
    BUTTON_CONTAINER = "button-container"
    CLOSE_BUTTON = "close-btn"


class DetailModal(ModalScreen[None]):
    """Side panel with the full record of the selected creature."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
    ]

    def __init__(self, record: DetailRecord) -> None:
        """Initialize the detail modal.

        Args:
            record: The creature record to display
        """
        super().__init__()
        self.record = record

    def compose(self) -> ComposeResult:
        """Create the layout for the detail modal."""
        with Vertical(id=DetailModalIDs.DETAIL_MODAL):
            yield Static(capitalize_first_letter(self.record.name), id=DetailModalIDs.MODAL_TITLE)

            with Vertical(id=DetailModalIDs.FIELDS_CONTAINER):
                yield Label(f"[bold]ID:[/] {format_dex_number(self.record.id)}", id=DetailModalIDs.CREATURE_ID)
                yield Label(
                    f"[bold]Type:[/] {format_category_badges(self.record.category_names)}",
                    id=DetailModalIDs.CREATURE_CATEGORIES,
                )
                yield Label(
                    f"[bold]Sprite:[/] {escape(self.record.sprite_url or 'not available')}",
                    id=DetailModalIDs.CREATURE_SPRITE,
                )

            with Horizontal(id=DetailModalIDs.BUTTON_CONTAINER):
                yield Button("Close", variant="primary", id=DetailModalIDs.CLOSE_BUTTON)

    def action_close(self) -> None:
        """Dismiss the modal."""
        self.dismiss(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == DetailModalIDs.CLOSE_BUTTON:
            self.action_close()

"""Category filter widget: one checkbox per creature category."""

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Checkbox, Static

from dexranger.services.filters import KNOWN_CATEGORIES

CHECKBOX_ID_PREFIX = "category-"


class CategoryFilter(Static):
    """Row of category checkboxes. At most two stay checked; the service decides which."""

    class CategoryToggled(Message):
        """Message sent when a category checkbox is toggled."""

        def __init__(self, category: str) -> None:
            super().__init__()
            self.category = category

    def compose(self) -> ComposeResult:
        with Horizontal(id="category-filter-container"):
            for category in KNOWN_CATEGORIES:
                yield Checkbox(category.capitalize(), id=f"{CHECKBOX_ID_PREFIX}{category}", classes="category-checkbox")

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        event.stop()
        category = (event.checkbox.id or "")[len(CHECKBOX_ID_PREFIX) :]
        if category:
            self.post_message(self.CategoryToggled(category))

    def sync_selection(self, selected: tuple[str, ...]) -> None:
        """Reflect the service's selection, e.g. after the earliest category was evicted."""
        for checkbox in self.query(Checkbox):
            category = (checkbox.id or "")[len(CHECKBOX_ID_PREFIX) :]
            checked = category in selected
            if checkbox.value != checked:
                with checkbox.prevent(Checkbox.Changed):
                    checkbox.value = checked

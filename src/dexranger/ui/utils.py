from rich.markup import escape

from dexranger.ui.constants import CATEGORY_COLORS, DEFAULT_CATEGORY_COLOR


def capitalize_first_letter(text: str) -> str:
    """Capitalize the first letter of a name, leaving the rest untouched.

    Args:
        text: Name as returned by the API (e.g., "mr-mime")

    Returns:
        Display name (e.g., "Mr-mime")
    """
    if not text:
        return ""
    return text[0].upper() + text[1:]


def format_dex_number(creature_id: int) -> str:
    """Format a creature id as a dex number.

    Args:
        creature_id: Numeric id

    Returns:
        Zero-padded dex number (e.g., "#025")
    """
    return f"#{creature_id:03d}"


def format_category_badge(category: str) -> str:
    """Format a category as a colored badge in rich markup.

    Args:
        category: Category name (e.g., "fire")

    Returns:
        Markup string with the category on its color
    """
    color = CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR)
    return f"[bold white on {color}] {escape(category.capitalize())} [/]"


def format_category_badges(categories: list[str]) -> str:
    return " ".join(format_category_badge(category) for category in categories)


def format_progress_text(shown: int, total_count: int | None) -> str:
    """Format how many creatures are shown out of the total for the current filter."""
    if total_count is None:
        return f"{shown} loaded"
    return f"{shown} / {total_count} loaded"

# Pagination constants
PAGE_SIZE = 50  # Number of creature ids requested per page

# Filter constants
FILTER_DEBOUNCE_MS = 250  # Debounce time for search requests in milliseconds

# Infinite scroll constants
SCROLL_THRESHOLD_ITEMS = 4  # Load more when this many items from the bottom

# Badge colors per category (rich color names)
CATEGORY_COLORS = {
    "normal": "grey62",
    "fire": "red3",
    "water": "dodger_blue2",
    "grass": "green3",
    "electric": "yellow2",
    "ice": "dark_cyan",
    "fighting": "dark_orange3",
    "poison": "medium_purple3",
    "ground": "light_goldenrod3",
    "flying": "light_slate_blue",
    "psychic": "hot_pink3",
    "bug": "chartreuse3",
    "rock": "dark_goldenrod",
    "ghost": "purple4",
    "dark": "grey35",
    "dragon": "blue_violet",
    "steel": "light_steel_blue3",
    "fairy": "plum2",
}
DEFAULT_CATEGORY_COLOR = "grey50"

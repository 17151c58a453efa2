from .category_filter import CategoryFilter
from .creature_list import CreatureList
from .search_bar import SearchBar
from .title_bar import TitleBar

__all__ = ["CategoryFilter", "CreatureList", "SearchBar", "TitleBar"]

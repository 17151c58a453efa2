"""Modal dialogs for DexRanger."""

from .detail_modal import DetailModal

__all__ = ["DetailModal"]

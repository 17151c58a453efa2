class DexError(Exception):
    """Base error for failures talking to the creature API."""


class NetworkError(DexError):
    """Transient failure: connection problems, timeouts, 5xx or 429 responses."""


class NotFoundError(DexError):
    """The requested resource does not exist (HTTP 404)."""

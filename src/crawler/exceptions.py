class FetchError(Exception):
    """Raised when a page cannot be fetched."""

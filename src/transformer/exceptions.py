class TransformerError(Exception):
    """Raised when an HTML document cannot be converted to the requested format."""

class ParserError(Exception):
    """Raised when an HTML document cannot be read or converted."""


class ExtractorError(Exception):
    """Raised when elements cannot be extracted from an HTML document."""

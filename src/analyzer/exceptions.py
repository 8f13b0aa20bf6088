class AnalyzerError(Exception):
    """Raised when statistics cannot be computed for an HTML document."""

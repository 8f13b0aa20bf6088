class ComparatorError(Exception):
    """Raised when two HTML documents cannot be compared.

    The original exception is chained as __cause__.
    """

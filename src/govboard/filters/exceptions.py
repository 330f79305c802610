"""Custom exceptions for ticket filters."""


class FilterError(Exception):
    """A filter was configured with invalid arguments."""

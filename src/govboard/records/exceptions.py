"""Custom exceptions for record parsing."""


class RecordError(Exception):
    """Input record is not a mapping and cannot be parsed."""

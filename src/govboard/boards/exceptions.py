"""Custom exceptions for board schemas."""


class BoardError(Exception):
    """Base exception for board schema errors."""


class BoardSchemaError(BoardError):
    """A board schema violates the column layout invariants."""

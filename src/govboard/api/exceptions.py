"""Custom exceptions for the REST API."""


class NotFoundError(Exception):
    """A requested team or project does not exist in the current snapshot."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} {identifier!r} not found")
        self.kind = kind
        self.identifier = identifier

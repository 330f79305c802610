"""Custom exceptions for the tracker fetch layer."""

CONNECTIVITY_MESSAGE = "Failed to load dashboard data. Please check backend connectivity."


class FetchError(Exception):
    """A request to the tracker backend failed.

    Attributes:
        path: API path of the failed request.
        status_code: HTTP status, None for transport errors.
    """

    def __init__(self, message: str, path: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.path = path
        self.status_code = status_code

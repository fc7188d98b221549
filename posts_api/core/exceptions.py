"""Domain errors surfaced to the HTTP layer."""


class StoreUnavailable(Exception):
    """The document store could not be reached, timed out, or failed server-side."""

    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        message = f"Document store unavailable during {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(message)

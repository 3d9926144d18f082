"""Domain errors raised by the store and services, mapped to HTTP responses in main.py."""


class ABTestError(Exception):
    """Base class for errors the service knows how to report."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ABTestError):
    """Required fields missing or malformed input."""
    status_code = 400


class NotFoundError(ABTestError):
    """Unknown test id or image key."""
    status_code = 404


class DanglingReferenceError(ABTestError):
    """A view was written for a test that does not exist. Indicates a caller bug."""
    status_code = 500

"""
Application errors. Both are answered by the API with 500 and a fixed message;
the underlying exception is only logged.
"""


class CompanionError(Exception):
    """Base class for errors raised by companion services."""

    user_message = "Something went wrong"

    def __init__(self, message: str = "", user_message: str = None):
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


class UpstreamServiceError(CompanionError):
    """A third-party provider (prayer times, Quran text, generative text) failed."""

    user_message = "Upstream service unavailable"


class PersistenceError(CompanionError):
    """The daily log store rejected the input or the database failed."""

    user_message = "Failed to save log"

"""Errors raised by the recognition pipeline."""


class RecognitionError(Exception):
    """Base error for food recognition failures."""


class QuotaExceeded(RecognitionError):
    """Daily request quota is used up; no provider was called."""

    def __init__(self, daily_limit: int) -> None:
        super().__init__(
            f"Daily API quota of {daily_limit} requests exceeded. "
            "Please try again tomorrow."
        )
        self.daily_limit = daily_limit


class ProviderError(RecognitionError):
    """A provider call failed in transport or while reading its response."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class UnsupportedResponseShape(RecognitionError):
    """The provider response did not match any known shape."""

    def __init__(self, keys: list[str]) -> None:
        listed = ", ".join(keys) if keys else "none"
        super().__init__(
            "No food recognized or unsupported response format "
            f"(available keys: {listed})"
        )
        self.keys = keys


class CorrelationMismatch(RecognitionError):
    """The fallback proxy answered with a different request id."""

    def __init__(self, expected: str, received: object) -> None:
        super().__init__(
            f"Fallback response id mismatch: expected {expected}, got {received}"
        )
        self.expected = expected
        self.received = received


class InvalidRequest(RecognitionError, ValueError):
    """The caller supplied input that cannot be sent to a provider."""

"""Custom exception hierarchy for automute."""

from __future__ import annotations


class AutoMuteError(Exception):
    """Base exception for all automute errors."""


class AutoMuteConfigError(AutoMuteError):
    """Invalid or missing configuration."""


class MalformedIdentifierError(AutoMuteError):
    """Room, device, or display identifier is not in the expected format."""

    def __init__(self, message: str, *, identifier: str = "") -> None:
        self.identifier = identifier
        super().__init__(message)


class InvalidValueError(AutoMuteError):
    """Event value could not be parsed into the type its key requires."""

    def __init__(self, message: str, *, key: str = "", value: str = "") -> None:
        self.key = key
        self.value = value
        super().__init__(message)


class AutoMuteTransportError(AutoMuteError):
    """HTTP-level failure (network, invalid JSON, unexpected payload)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class UnexpectedStatusError(AutoMuteTransportError):
    """Server answered with anything other than HTTP 200.

    The local room state is not rolled back when a push fails this way.
    """

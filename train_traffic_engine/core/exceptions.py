"""Dispatch error taxonomy shared across layers."""

from __future__ import annotations


class DispatchError(RuntimeError):
    """Base error for anything that fails a skill invocation."""


class InvalidEventError(DispatchError):
    """Raised when an inbound event is missing required fields or is malformed."""


class AuthorizationError(DispatchError):
    """Raised when the session's application id does not match the configured one."""


class UnsupportedIntentError(DispatchError):
    """Raised when no handler is registered for the requested intent name."""

    def __init__(self, intent_name: str) -> None:
        super().__init__(f"Unsupported intent = {intent_name}")
        self.intent_name = intent_name


class HandlerError(DispatchError):
    """Raised when a skill handler fails or breaks its response contract."""


class FetchError(DispatchError):
    """Raised when the external status source fails or returns unusable data."""


class ResponseAlreadySentError(DispatchError):
    """Raised when a second terminal response operation is attempted."""


__all__ = [
    "AuthorizationError",
    "DispatchError",
    "FetchError",
    "HandlerError",
    "InvalidEventError",
    "ResponseAlreadySentError",
    "UnsupportedIntentError",
]

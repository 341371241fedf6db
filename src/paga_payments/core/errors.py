"""
Exception hierarchy for the Paga client.

Every error keeps whatever the provider sent back (``payload``) so callers can
display it.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple

__all__ = [
    "BusinessError",
    "ConfigurationError",
    "InvalidOperation",
    "MissingCredential",
    "PagaError",
    "ProtocolError",
    "TransportError",
]


class PagaError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str, *, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class ConfigurationError(PagaError, ValueError):
    """Raised when the supplied configuration is invalid."""


class MissingCredential(ConfigurationError):
    """Raised when one or more of the required credential values is absent."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing: Tuple[str, ...] = tuple(missing)
        super().__init__(
            "Missing required environment variables: " + ", ".join(self.missing)
        )


class InvalidOperation(PagaError, ValueError):
    """Raised for an operation name (or field) the builder does not know."""


class TransportError(PagaError):
    """The request could not be delivered or no response was received."""


class ProtocolError(PagaError):
    """The provider answered with an HTTP error or a malformed body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.status_code = status_code


class BusinessError(PagaError):
    """A well-formed response whose ``responseCode`` is not zero."""

    def __init__(
        self,
        operation: str,
        response_code: int,
        message: Optional[str],
        *,
        payload: Any = None,
    ) -> None:
        super().__init__(
            f"{operation} returned code {response_code}: {message}",
            payload=payload,
        )
        self.operation = operation
        self.response_code = response_code
        self.provider_message = message

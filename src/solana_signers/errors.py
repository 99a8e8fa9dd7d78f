"""Error taxonomy shared by every signer backend.

Messages can carry key material, tokens or signed payload fragments, so the
default rendering of every error is redacted:

    >>> err = RemoteApiError("Vault API error 403")
    >>> str(err)
    'SignerError::RemoteApiError([REDACTED])'

Callers that really want the text must ask for it explicitly with
``err.unredacted_message()``.
"""

import json
from enum import Enum

import httpx
from pydantic import ValidationError


class ErrorKind(str, Enum):
    """Kind tag carried by every signer error."""
    INVALID_PRIVATE_KEY = "InvalidPrivateKey"
    INVALID_PUBLIC_KEY = "InvalidPublicKey"
    SIGNING_FAILED = "SigningFailed"
    REMOTE_API_ERROR = "RemoteApiError"
    HTTP_ERROR = "HttpError"
    SERIALIZATION_ERROR = "SerializationError"
    CONFIG_ERROR = "ConfigError"
    NOT_AVAILABLE = "NotAvailable"
    IO_ERROR = "IoError"
    OTHER = "Other"


class SignerError(Exception):
    """Base class for all signer errors."""

    kind: ErrorKind = ErrorKind.OTHER

    def __init__(self, message: str = ""):
        super().__init__(message)
        self._message = message

    def unredacted_message(self) -> str:
        """Return the full, unredacted message.

        May contain secrets. Only log this deliberately.
        """
        return self._message

    def __str__(self) -> str:
        return f"SignerError::{self.kind.value}([REDACTED])"

    def __repr__(self) -> str:
        return str(self)


class InvalidPrivateKeyError(SignerError):
    kind = ErrorKind.INVALID_PRIVATE_KEY


class InvalidPublicKeyError(SignerError):
    kind = ErrorKind.INVALID_PUBLIC_KEY


class SigningFailedError(SignerError):
    kind = ErrorKind.SIGNING_FAILED


class RemoteApiError(SignerError):
    """Non-success status or a missing field in a remote API response."""
    kind = ErrorKind.REMOTE_API_ERROR


class HttpError(SignerError):
    """Transport-level failure (connection, TLS, timeout)."""
    kind = ErrorKind.HTTP_ERROR


class SerializationError(SignerError):
    kind = ErrorKind.SERIALIZATION_ERROR


class ConfigError(SignerError):
    kind = ErrorKind.CONFIG_ERROR


class NotAvailableError(SignerError):
    kind = ErrorKind.NOT_AVAILABLE


class SignerIOError(SignerError):
    kind = ErrorKind.IO_ERROR


class OtherSignerError(SignerError):
    kind = ErrorKind.OTHER


def from_exception(exc: Exception, context: str = "") -> SignerError:
    """Map a library exception onto the signer error taxonomy.

    Args:
        exc: Exception raised by httpx, json, pydantic or the OS
        context: Optional prefix for the message

    Returns:
        SignerError subclass instance (not raised)
    """
    prefix = f"{context}: " if context else ""

    if isinstance(exc, SignerError):
        return exc
    if isinstance(exc, httpx.HTTPError):
        return HttpError(f"{prefix}{exc}")
    if isinstance(exc, (json.JSONDecodeError, UnicodeDecodeError, ValidationError)):
        return SerializationError(f"{prefix}{exc}")
    if isinstance(exc, OSError):
        return SignerIOError(f"{prefix}{exc}")
    return OtherSignerError(f"{prefix}{exc}")

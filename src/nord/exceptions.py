"""Custom exceptions for the Nord action client.

Every failure the client raises is one of three terminal kinds:

- ValidationError: raised before any network interaction.
- ProtocolError: raised while framing or interpreting wire bytes.
- ServerError: the receipt explicitly carries an error code.

Each carries a machine-readable ``kind`` (or ``code``) so callers never
need to match on message text.
"""

from enum import Enum


class ValidationErrorKind(str, Enum):
    """Reason an action was rejected locally."""

    NEGATIVE = "negative"
    PRECISION_LOSS = "precision loss"
    OUT_OF_RANGE = "out of range"
    INVALID_DECIMALS = "invalid decimals"
    INVALID_KEY_LENGTH = "invalid key length"
    UNSUPPORTED_KEY_TYPE = "unsupported key type"
    NON_POSITIVE_AMOUNT = "non-positive amount"
    INVALID_FILL_MODE = "invalid fill mode"
    INVALID_SIDE = "invalid side"
    EXPIRY_IN_PAST = "expiry in past"
    MISSING_REFERENCE = "missing reference"
    INVALID_NUMBER = "invalid number"


class ProtocolErrorKind(str, Enum):
    """Reason wire bytes could not be framed or interpreted."""

    OVERSIZE = "oversize"
    TRUNCATED = "truncated"
    MALFORMED = "malformed"
    UNEXPECTED_RECEIPT_KIND = "unexpected receipt kind"


class NordError(Exception):
    """Base exception for all Nord client errors."""


class ValidationError(NordError):
    """Raised when action parameters are invalid. Never reaches the network."""

    def __init__(self, kind: ValidationErrorKind, message: str) -> None:
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind


class ProtocolError(NordError):
    """Raised when wire bytes violate framing or the receipt contract."""

    def __init__(self, kind: ProtocolErrorKind, message: str) -> None:
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind


class ServerError(NordError):
    """Raised when the server answers an action with an error receipt.

    Args:
        code: Server-defined error code from the receipt.
        error_name: Symbolic name of the code (``UNKNOWN_<code>`` if unmapped).
        action_kind: Name of the submitted action variant.
    """

    def __init__(self, code: int, error_name: str, action_kind: str) -> None:
        super().__init__(
            f"Could not {action_kind}, reason: {error_name} (code {code})"
        )
        self.code = code
        self.error_name = error_name
        self.action_kind = action_kind

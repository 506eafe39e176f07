"""Shared enumerations and value types for Nord actions.

All monetary values entering the client use Decimal. Integers in this module
are already-scaled wire values.
"""

from dataclasses import dataclass
from enum import Enum

from nord.exceptions import ValidationError, ValidationErrorKind


class KeyType(str, Enum):
    """Signature scheme of a public key."""

    ED25519 = "ed25519"
    SECP256K1 = "secp256k1"
    BLS12_381 = "bls12_381"


# Required pubkey lengths for user/session keys. BLS12-381 is not accepted.
PUBKEY_LENGTHS: dict[KeyType, int] = {
    KeyType.ED25519: 32,
    KeyType.SECP256K1: 33,
}


class Side(str, Enum):
    """Order side."""

    ASK = "ask"
    BID = "bid"


class FillMode(str, Enum):
    """Order fill mode."""

    LIMIT = "limit"
    POST_ONLY = "post_only"
    IMMEDIATE_OR_CANCEL = "immediate_or_cancel"
    FILL_OR_KILL = "fill_or_kill"


@dataclass(frozen=True)
class U128:
    """A 128-bit unsigned integer split into two 64-bit words for transport.

    ``lo + hi * 2**64`` reconstructs the original value.
    """

    lo: int = 0
    hi: int = 0

    @property
    def value(self) -> int:
        return self.lo | (self.hi << 64)


@dataclass(frozen=True)
class Market:
    """Market metadata needed to scale prices and sizes."""

    symbol: str
    market_id: int
    base_token_id: int
    quote_token_id: int
    price_decimals: int
    size_decimals: int


@dataclass(frozen=True)
class Token:
    """Token metadata needed to scale asset amounts."""

    symbol: str
    token_id: int
    decimals: int
    eth_addr: str = ""


def check_pubkey_length(key_type: KeyType, pubkey: bytes) -> None:
    """Validate a user or session public key against its scheme's length.

    Raises:
        ValidationError: UNSUPPORTED_KEY_TYPE for BLS12-381 keys,
            INVALID_KEY_LENGTH when the length does not match.
    """
    expected = PUBKEY_LENGTHS.get(key_type)
    if expected is None:
        raise ValidationError(
            ValidationErrorKind.UNSUPPORTED_KEY_TYPE,
            f"cannot use {key_type.value} for user or session keys, "
            "use ed25519 or secp256k1 instead",
        )
    if len(pubkey) != expected:
        raise ValidationError(
            ValidationErrorKind.INVALID_KEY_LENGTH,
            f"{key_type.value} pubkeys must be {expected} bytes, got {len(pubkey)}",
        )


def find_market(markets: list[Market], market_id: int) -> Market:
    """Look up a market by id.

    Markets are indexed by id, so ``markets[market_id]`` is the market.
    """
    if market_id < 0 or market_id >= len(markets):
        raise ValidationError(
            ValidationErrorKind.MISSING_REFERENCE,
            f"market with market_id={market_id} not found",
        )
    return markets[market_id]


def find_token(tokens: list[Token], token_id: int) -> Token:
    """Look up a token by id (tokens are indexed by id)."""
    if token_id < 0 or token_id >= len(tokens):
        raise ValidationError(
            ValidationErrorKind.MISSING_REFERENCE,
            f"token with token_id={token_id} not found",
        )
    return tokens[token_id]

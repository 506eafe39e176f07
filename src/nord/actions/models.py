"""Typed action variants.

An ``Action`` is an envelope (timestamp, nonce) around exactly one variant.
Variants are frozen dataclasses; ``ActionKind`` is their union, consumed
with ``match`` statements that end in ``assert_never`` so a new variant
cannot be silently mishandled.

Integer amounts here are already scaled (see nord.scaling).
"""

from dataclasses import dataclass
from typing import assert_never

from nord.types import FillMode, Side, U128


@dataclass(frozen=True)
class CreateSession:
    """Authorize a session key for the user's wallet key."""

    user_pubkey: bytes
    session_pubkey: bytes
    expiry_timestamp: int


@dataclass(frozen=True)
class RevokeSession:
    session_id: int


@dataclass(frozen=True)
class Withdraw:
    session_id: int
    token_id: int
    amount: int


@dataclass(frozen=True)
class PlaceOrder:
    """Place an order on a market.

    ``delegator_account_id`` names the account being liquidated when the
    order is placed on its behalf.
    """

    session_id: int
    market_id: int
    side: Side
    fill_mode: FillMode
    is_reduce_only: bool
    price: int
    size: int
    quote_size: U128
    sender_account_id: int | None = None
    delegator_account_id: int | None = None
    client_order_id: int | None = None


@dataclass(frozen=True)
class CancelOrderById:
    session_id: int
    order_id: int
    sender_account_id: int | None = None
    delegator_account_id: int | None = None


@dataclass(frozen=True)
class Transfer:
    """Move an asset between accounts.

    With ``to_account_id=None`` the server allocates a new account for the
    recipient and reports its id in the receipt.
    """

    session_id: int
    from_account_id: int
    token_id: int
    amount: int
    to_account_id: int | None = None


ActionKind = (
    CreateSession | RevokeSession | Withdraw | PlaceOrder | CancelOrderById | Transfer
)


@dataclass(frozen=True)
class Action:
    """A single instruction for the server.

    Args:
        current_timestamp: Caller time in 100 ns ticks (milliseconds * 10000).
        nonce: Counter unique within ``current_timestamp``.
        kind: The action variant.
    """

    current_timestamp: int
    nonce: int
    kind: ActionKind


def is_session_lifecycle(kind: ActionKind) -> bool:
    """True for actions that must be signed by the wallet key."""
    match kind:
        case CreateSession() | RevokeSession():
            return True
        case Withdraw() | PlaceOrder() | CancelOrderById() | Transfer():
            return False
        case _:
            assert_never(kind)


def describe(kind: ActionKind) -> str:
    """Human-readable verb phrase for error messages ("place the order")."""
    match kind:
        case CreateSession():
            return "create a new session"
        case RevokeSession():
            return "revoke the session"
        case Withdraw():
            return "withdraw"
        case PlaceOrder():
            return "place the order"
        case CancelOrderById():
            return "cancel the order"
        case Transfer():
            return "transfer asset to other account"
        case _:
            assert_never(kind)

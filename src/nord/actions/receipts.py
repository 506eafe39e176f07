"""Typed receipts and receipt validation.

The server answers every action with exactly one receipt: either an error
code or the result variant matching the action's kind.
"""

from dataclasses import dataclass
from typing import assert_never

from nord.actions.models import (
    Action,
    CancelOrderById,
    CreateSession,
    PlaceOrder,
    RevokeSession,
    Transfer,
    Withdraw,
    describe,
)
from nord.exceptions import ProtocolError, ProtocolErrorKind, ServerError
from nord.wire.schema import error_name


@dataclass(frozen=True)
class ErrorReceipt:
    code: int


@dataclass(frozen=True)
class SessionCreated:
    session_id: int


@dataclass(frozen=True)
class SessionRevoked:
    pass


@dataclass(frozen=True)
class Withdrawn:
    pass


@dataclass(frozen=True)
class OrderPlaced:
    """Result of PlaceOrder. ``order_id`` is None when nothing rests on the book."""

    order_id: int | None


@dataclass(frozen=True)
class OrderCancelled:
    order_id: int


@dataclass(frozen=True)
class Transferred:
    from_account_id: int
    to_account_id: int
    token_id: int
    amount: int
    account_created: bool


ReceiptResult = (
    SessionCreated
    | SessionRevoked
    | Withdrawn
    | OrderPlaced
    | OrderCancelled
    | Transferred
)
ReceiptKind = ErrorReceipt | ReceiptResult


@dataclass(frozen=True)
class Receipt:
    action_id: int
    kind: ReceiptKind


def expected_result_type(action: Action) -> type[ReceiptResult]:
    """Receipt result variant the server must answer ``action`` with."""
    kind = action.kind
    match kind:
        case CreateSession():
            return SessionCreated
        case RevokeSession():
            return SessionRevoked
        case Withdraw():
            return Withdrawn
        case PlaceOrder():
            return OrderPlaced
        case CancelOrderById():
            return OrderCancelled
        case Transfer():
            return Transferred
        case _:
            assert_never(kind)


def validate_receipt(action: Action, receipt: Receipt) -> ReceiptResult:
    """Check a decoded receipt against the action it answers.

    Returns:
        The typed result payload.

    Raises:
        ServerError: The receipt carries an error code.
        ProtocolError: UNEXPECTED_RECEIPT_KIND if the result variant does not
            match the action variant.
    """
    result = receipt.kind
    if isinstance(result, ErrorReceipt):
        raise ServerError(result.code, error_name(result.code), describe(action.kind))

    expected = expected_result_type(action)
    if not isinstance(result, expected):
        raise ProtocolError(
            ProtocolErrorKind.UNEXPECTED_RECEIPT_KIND,
            f"expected {expected.__name__} for {type(action.kind).__name__}, "
            f"got {type(result).__name__}",
        )
    return result

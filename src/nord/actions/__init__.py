"""Action layer -- typed action variants, builders and receipts."""

from nord.actions.builder import (
    SESSION_TTL,
    build_cancel_order,
    build_create_session,
    build_place_order,
    build_revoke_session,
    build_transfer,
    build_withdraw,
)
from nord.actions.models import (
    Action,
    ActionKind,
    CancelOrderById,
    CreateSession,
    PlaceOrder,
    RevokeSession,
    Transfer,
    Withdraw,
)
from nord.actions.receipts import (
    ErrorReceipt,
    OrderCancelled,
    OrderPlaced,
    Receipt,
    ReceiptResult,
    SessionCreated,
    SessionRevoked,
    Transferred,
    Withdrawn,
    validate_receipt,
)

__all__ = [
    "SESSION_TTL",
    "Action",
    "ActionKind",
    "CancelOrderById",
    "CreateSession",
    "ErrorReceipt",
    "OrderCancelled",
    "OrderPlaced",
    "PlaceOrder",
    "Receipt",
    "ReceiptResult",
    "RevokeSession",
    "SessionCreated",
    "SessionRevoked",
    "Transfer",
    "Transferred",
    "Withdraw",
    "Withdrawn",
    "build_cancel_order",
    "build_create_session",
    "build_place_order",
    "build_revoke_session",
    "build_transfer",
    "build_withdraw",
    "validate_receipt",
]

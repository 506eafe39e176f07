"""Mapping between typed actions/receipts and their wire messages.

``encode_action`` / ``decode_receipt`` are what the client needs;
``decode_action`` / ``encode_receipt`` are the server-side mirror, used by
test doubles and inspection tools.
"""

from typing import Any, assert_never

from google.protobuf.message import Message

from nord.actions.models import (
    Action,
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
    SessionCreated,
    SessionRevoked,
    Transferred,
    Withdrawn,
)
from nord.exceptions import ProtocolError, ProtocolErrorKind
from nord.types import FillMode, Side, U128
from nord.wire import schema
from nord.wire.codec import decode_length_delimited, encode_length_delimited


def _fill(body: Message, **fields: Any) -> None:
    """Mark a oneof sub-message as present and set its non-None fields."""
    body.SetInParent()
    for name, value in fields.items():
        if value is not None:
            setattr(body, name, value)


def _optional(body: Message, name: str) -> Any:
    return getattr(body, name) if body.HasField(name) else None


def _side_from_wire(value: int) -> Side:
    try:
        return Side[schema.Side.Name(value)]
    except ValueError as exc:
        raise ProtocolError(ProtocolErrorKind.MALFORMED, f"unknown side {value}") from exc


def _fill_mode_from_wire(value: int) -> FillMode:
    try:
        return FillMode[schema.FillMode.Name(value)]
    except ValueError as exc:
        raise ProtocolError(
            ProtocolErrorKind.MALFORMED, f"unknown fill mode {value}"
        ) from exc


def action_to_proto(action: Action) -> Message:
    message = schema.Action(
        current_timestamp=action.current_timestamp, nonce=action.nonce
    )
    kind = action.kind
    match kind:
        case CreateSession():
            _fill(
                message.create_session,
                user_pubkey=kind.user_pubkey,
                blst_pubkey=kind.session_pubkey,
                expiry_timestamp=kind.expiry_timestamp,
            )
        case RevokeSession():
            _fill(message.revoke_session, session_id=kind.session_id)
        case Withdraw():
            _fill(
                message.withdraw,
                session_id=kind.session_id,
                token_id=kind.token_id,
                amount=kind.amount,
            )
        case PlaceOrder():
            body = message.place_order
            _fill(
                body,
                session_id=kind.session_id,
                sender_account_id=kind.sender_account_id,
                market_id=kind.market_id,
                side=schema.Side.Value(kind.side.name),
                fill_mode=schema.FillMode.Value(kind.fill_mode.name),
                is_reduce_only=kind.is_reduce_only,
                price=kind.price,
                size=kind.size,
                delegator_account_id=kind.delegator_account_id,
                client_order_id=kind.client_order_id,
            )
            _fill(body.quote_size, lo=kind.quote_size.lo, hi=kind.quote_size.hi)
        case CancelOrderById():
            _fill(
                message.cancel_order_by_id,
                session_id=kind.session_id,
                sender_account_id=kind.sender_account_id,
                order_id=kind.order_id,
                delegator_account_id=kind.delegator_account_id,
            )
        case Transfer():
            _fill(
                message.transfer,
                session_id=kind.session_id,
                from_account_id=kind.from_account_id,
                to_account_id=kind.to_account_id,
                token_id=kind.token_id,
                amount=kind.amount,
            )
        case _:
            assert_never(kind)
    return message


def action_from_proto(message: Message) -> Action:
    which = message.WhichOneof("kind")
    match which:
        case "create_session":
            body = message.create_session
            kind = CreateSession(
                user_pubkey=bytes(body.user_pubkey),
                session_pubkey=bytes(body.blst_pubkey),
                expiry_timestamp=body.expiry_timestamp,
            )
        case "revoke_session":
            kind = RevokeSession(session_id=message.revoke_session.session_id)
        case "withdraw":
            body = message.withdraw
            kind = Withdraw(
                session_id=body.session_id, token_id=body.token_id, amount=body.amount
            )
        case "place_order":
            body = message.place_order
            kind = PlaceOrder(
                session_id=body.session_id,
                market_id=body.market_id,
                side=_side_from_wire(body.side),
                fill_mode=_fill_mode_from_wire(body.fill_mode),
                is_reduce_only=body.is_reduce_only,
                price=body.price,
                size=body.size,
                quote_size=U128(lo=body.quote_size.lo, hi=body.quote_size.hi),
                sender_account_id=_optional(body, "sender_account_id"),
                delegator_account_id=_optional(body, "delegator_account_id"),
                client_order_id=_optional(body, "client_order_id"),
            )
        case "cancel_order_by_id":
            body = message.cancel_order_by_id
            kind = CancelOrderById(
                session_id=body.session_id,
                order_id=body.order_id,
                sender_account_id=_optional(body, "sender_account_id"),
                delegator_account_id=_optional(body, "delegator_account_id"),
            )
        case "transfer":
            body = message.transfer
            kind = Transfer(
                session_id=body.session_id,
                from_account_id=body.from_account_id,
                token_id=body.token_id,
                amount=body.amount,
                to_account_id=_optional(body, "to_account_id"),
            )
        case _:
            raise ProtocolError(ProtocolErrorKind.MALFORMED, "action carries no kind")
    return Action(
        current_timestamp=message.current_timestamp, nonce=message.nonce, kind=kind
    )


def receipt_to_proto(receipt: Receipt) -> Message:
    message = schema.Receipt(action_id=receipt.action_id)
    kind = receipt.kind
    match kind:
        case ErrorReceipt():
            message.err = kind.code
        case SessionCreated():
            _fill(message.create_session_result, session_id=kind.session_id)
        case SessionRevoked():
            _fill(message.session_revoked)
        case Withdrawn():
            _fill(message.withdraw_result)
        case OrderPlaced():
            body = message.place_order_result
            _fill(body)
            if kind.order_id is not None:
                _fill(body.posted, order_id=kind.order_id)
        case OrderCancelled():
            _fill(message.cancel_order_result, order_id=kind.order_id)
        case Transferred():
            _fill(
                message.transferred,
                from_account_id=kind.from_account_id,
                to_account_id=kind.to_account_id,
                token_id=kind.token_id,
                amount=kind.amount,
                account_created=kind.account_created,
            )
        case _:
            assert_never(kind)
    return message


def receipt_from_proto(message: Message) -> Receipt:
    which = message.WhichOneof("kind")
    match which:
        case "err":
            kind = ErrorReceipt(code=message.err)
        case "create_session_result":
            kind = SessionCreated(session_id=message.create_session_result.session_id)
        case "session_revoked":
            kind = SessionRevoked()
        case "withdraw_result":
            kind = Withdrawn()
        case "place_order_result":
            body = message.place_order_result
            kind = OrderPlaced(
                order_id=body.posted.order_id if body.HasField("posted") else None
            )
        case "cancel_order_result":
            kind = OrderCancelled(order_id=message.cancel_order_result.order_id)
        case "transferred":
            body = message.transferred
            kind = Transferred(
                from_account_id=body.from_account_id,
                to_account_id=body.to_account_id,
                token_id=body.token_id,
                amount=body.amount,
                account_created=body.account_created,
            )
        case _:
            raise ProtocolError(ProtocolErrorKind.MALFORMED, "receipt carries no kind")
    return Receipt(action_id=message.action_id, kind=kind)


def encode_action(action: Action) -> bytes:
    """Encode an action as a length-delimited wire message."""
    return encode_length_delimited(action_to_proto(action))


def decode_action(data: bytes) -> Action:
    return action_from_proto(decode_length_delimited(data, schema.Action))


def encode_receipt(receipt: Receipt) -> bytes:
    return encode_length_delimited(receipt_to_proto(receipt))


def decode_receipt(data: bytes) -> Receipt:
    """Decode a length-delimited receipt into its typed form."""
    return receipt_from_proto(decode_length_delimited(data, schema.Receipt))

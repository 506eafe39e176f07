"""Tests for length-delimited framing and action/receipt wire mapping."""

import pytest
from google.protobuf.internal.encoder import _VarintBytes

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
from nord.wire.codec import MAX_PAYLOAD_SIZE, decode_length_delimited
from nord.wire.convert import (
    decode_action,
    decode_receipt,
    encode_action,
    encode_receipt,
)

TS = 17_000_000_000_000_000

ACTIONS = [
    Action(
        TS,
        0,
        CreateSession(
            user_pubkey=b"\x02" + bytes(32),
            session_pubkey=bytes(range(32)),
            expiry_timestamp=TS + 6_000_000_000,
        ),
    ),
    Action(TS, 1, RevokeSession(session_id=9)),
    Action(TS, 2, Withdraw(session_id=9, token_id=1, amount=250_000_000)),
    Action(
        TS,
        3,
        PlaceOrder(
            session_id=9,
            market_id=0,
            side=Side.BID,
            fill_mode=FillMode.LIMIT,
            is_reduce_only=False,
            price=100,
            size=1_000_000,
            quote_size=U128(lo=100_000_000, hi=0),
        ),
    ),
    Action(
        TS,
        4,
        PlaceOrder(
            session_id=9,
            market_id=3,
            side=Side.ASK,
            fill_mode=FillMode.FILL_OR_KILL,
            is_reduce_only=True,
            price=0,
            size=5,
            quote_size=U128(lo=1, hi=2),
            sender_account_id=0,
            delegator_account_id=12,
            client_order_id=(1 << 64) - 1,
        ),
    ),
    Action(TS, 5, CancelOrderById(session_id=9, order_id=77)),
    Action(
        TS,
        6,
        CancelOrderById(
            session_id=9, order_id=77, sender_account_id=3, delegator_account_id=4
        ),
    ),
    Action(TS, 7, Transfer(session_id=9, from_account_id=0, token_id=0, amount=10)),
    Action(
        TS,
        8,
        Transfer(
            session_id=9, from_account_id=0, token_id=0, amount=10, to_account_id=0
        ),
    ),
]

RECEIPTS = [
    Receipt(1, ErrorReceipt(code=11)),
    Receipt(2, SessionCreated(session_id=42)),
    Receipt(3, SessionRevoked()),
    Receipt(4, Withdrawn()),
    Receipt(5, OrderPlaced(order_id=1234)),
    Receipt(6, OrderPlaced(order_id=None)),
    Receipt(7, OrderCancelled(order_id=1234)),
    Receipt(
        8,
        Transferred(
            from_account_id=0,
            to_account_id=5,
            token_id=0,
            amount=10,
            account_created=True,
        ),
    ),
]


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------


class TestRoundTrip:
    @pytest.mark.parametrize("action", ACTIONS, ids=lambda a: type(a.kind).__name__)
    def test_action(self, action):
        assert decode_action(encode_action(action)) == action

    @pytest.mark.parametrize("receipt", RECEIPTS, ids=lambda r: type(r.kind).__name__)
    def test_receipt(self, receipt):
        assert decode_receipt(encode_receipt(receipt)) == receipt

    def test_optional_zero_is_distinct_from_absent(self):
        """An explicit account id 0 must survive; an absent one stays None."""
        absent, present = ACTIONS[7], ACTIONS[8]
        assert decode_action(encode_action(absent)).kind.to_account_id is None
        assert decode_action(encode_action(present)).kind.to_account_id == 0

    def test_trailing_bytes_are_ignored(self):
        action = ACTIONS[3]
        assert decode_action(encode_action(action) + b"\x00" * 64) == action


# ---------------------------------------------------------------------------
# Framing
# ---------------------------------------------------------------------------


class TestFraming:
    def test_prefix_is_payload_length(self):
        encoded = encode_action(ACTIONS[1])
        assert encoded[0] == len(encoded) - 1

    def test_encode_oversize(self):
        huge = Action(
            TS,
            0,
            CreateSession(
                user_pubkey=bytes(MAX_PAYLOAD_SIZE),
                session_pubkey=bytes(32),
                expiry_timestamp=TS + 1,
            ),
        )
        with pytest.raises(ProtocolError) as exc_info:
            encode_action(huge)
        assert exc_info.value.kind is ProtocolErrorKind.OVERSIZE

    def test_decode_declared_oversize(self):
        data = _VarintBytes(MAX_PAYLOAD_SIZE + 1) + bytes(16)
        with pytest.raises(ProtocolError) as exc_info:
            decode_length_delimited(data, schema.Receipt)
        assert exc_info.value.kind is ProtocolErrorKind.OVERSIZE

    def test_payload_at_limit_is_not_oversize(self):
        """A prefix of exactly MAX_PAYLOAD_SIZE is only short of data."""
        data = _VarintBytes(MAX_PAYLOAD_SIZE) + bytes(16)
        with pytest.raises(ProtocolError) as exc_info:
            decode_length_delimited(data, schema.Receipt)
        assert exc_info.value.kind is ProtocolErrorKind.TRUNCATED

    def test_decode_length_beyond_32_bits_is_oversize(self):
        payload = encode_receipt(RECEIPTS[1])[1:]
        data = _VarintBytes((1 << 32) + len(payload)) + payload
        with pytest.raises(ProtocolError) as exc_info:
            decode_length_delimited(data, schema.Receipt)
        assert exc_info.value.kind is ProtocolErrorKind.OVERSIZE

    def test_overlong_length_prefix_is_malformed(self):
        with pytest.raises(ProtocolError) as exc_info:
            decode_receipt(b"\xff" * 11 + b"\x00")
        assert exc_info.value.kind is ProtocolErrorKind.MALFORMED

    @pytest.mark.parametrize("cut", [1, 5])
    def test_truncated_payload(self, cut):
        encoded = encode_receipt(RECEIPTS[7])
        with pytest.raises(ProtocolError) as exc_info:
            decode_receipt(encoded[:-cut])
        assert exc_info.value.kind is ProtocolErrorKind.TRUNCATED

    @pytest.mark.parametrize("data", [b"", b"\x80", b"\xff\xff"])
    def test_truncated_prefix(self, data):
        with pytest.raises(ProtocolError) as exc_info:
            decode_receipt(data)
        assert exc_info.value.kind is ProtocolErrorKind.TRUNCATED

    def test_malformed_payload(self):
        garbage = b"\x0a\x05ab"
        with pytest.raises(ProtocolError) as exc_info:
            decode_receipt(_VarintBytes(len(garbage)) + garbage)
        assert exc_info.value.kind is ProtocolErrorKind.MALFORMED

    def test_receipt_without_kind(self):
        data = _VarintBytes(0)  # empty payload: no oneof set
        with pytest.raises(ProtocolError) as exc_info:
            decode_receipt(data)
        assert exc_info.value.kind is ProtocolErrorKind.MALFORMED


def test_error_name_falls_back_for_unknown_codes():
    assert schema.error_name(11) == "INSUFFICIENT_BALANCE"
    assert schema.error_name(999) == "UNKNOWN_999"


def test_error_names_match_receipt_enum():
    """Names returned to callers are the ones the Receipt schema carries."""
    enum = schema.Receipt.DESCRIPTOR.fields_by_name["err"].enum_type
    for code, value in enum.values_by_number.items():
        assert schema.error_name(code) == value.name

"""Tests for action builders: validation and scaling before any I/O."""

import dataclasses
from decimal import Decimal

import pytest

from nord.actions.builder import (
    SESSION_TTL,
    build_cancel_order,
    build_create_session,
    build_place_order,
    build_revoke_session,
    build_transfer,
    build_withdraw,
)
from nord.actions.models import CreateSession, PlaceOrder
from nord.exceptions import ValidationError, ValidationErrorKind
from nord.types import FillMode, Side, U128

NOW = 17_000_000_000_000_000
USER_PUBKEY = b"\x03" + bytes(32)
SESSION_PUBKEY = bytes(32)


def _kind_of(exc_info: pytest.ExceptionInfo[ValidationError]) -> ValidationErrorKind:
    return exc_info.value.kind


# ---------------------------------------------------------------------------
# CreateSession
# ---------------------------------------------------------------------------


class TestCreateSession:
    def test_default_expiry_is_ten_minutes(self):
        action = build_create_session(
            NOW, 0, user_pubkey=USER_PUBKEY, session_pubkey=SESSION_PUBKEY
        )
        assert SESSION_TTL == 6_000_000_000
        assert action.kind == CreateSession(
            user_pubkey=USER_PUBKEY,
            session_pubkey=SESSION_PUBKEY,
            expiry_timestamp=NOW + SESSION_TTL,
        )

    def test_explicit_future_expiry(self):
        action = build_create_session(
            NOW,
            0,
            user_pubkey=USER_PUBKEY,
            session_pubkey=SESSION_PUBKEY,
            expiry_timestamp=NOW + 1,
        )
        assert action.kind.expiry_timestamp == NOW + 1

    @pytest.mark.parametrize("expiry", [NOW, NOW - 1, 0])
    def test_expiry_must_be_in_future(self, expiry):
        with pytest.raises(ValidationError) as exc_info:
            build_create_session(
                NOW,
                0,
                user_pubkey=USER_PUBKEY,
                session_pubkey=SESSION_PUBKEY,
                expiry_timestamp=expiry,
            )
        assert _kind_of(exc_info) is ValidationErrorKind.EXPIRY_IN_PAST

    @pytest.mark.parametrize(
        "user_len, session_len",
        [(32, 32), (65, 32), (33, 33), (33, 31), (0, 0)],
    )
    def test_key_lengths(self, user_len, session_len):
        with pytest.raises(ValidationError) as exc_info:
            build_create_session(
                NOW, 0, user_pubkey=bytes(user_len), session_pubkey=bytes(session_len)
            )
        assert _kind_of(exc_info) is ValidationErrorKind.INVALID_KEY_LENGTH


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class TestEnvelope:
    def test_envelope_fields(self):
        action = build_revoke_session(NOW, 7, session_id=3)
        assert (action.current_timestamp, action.nonce) == (NOW, 7)
        assert action.kind.session_id == 3

    @pytest.mark.parametrize(
        "timestamp, nonce",
        [(-1, 0), (1 << 64, 0), (NOW, -1), (NOW, 1 << 32)],
    )
    def test_envelope_must_fit(self, timestamp, nonce):
        with pytest.raises(ValidationError) as exc_info:
            build_revoke_session(timestamp, nonce, session_id=3)
        assert _kind_of(exc_info) is ValidationErrorKind.OUT_OF_RANGE

    def test_actions_are_immutable(self):
        action = build_revoke_session(NOW, 0, session_id=3)
        with pytest.raises(dataclasses.FrozenInstanceError):
            action.nonce = 1  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Withdraw
# ---------------------------------------------------------------------------


class TestWithdraw:
    def test_scales_amount(self):
        action = build_withdraw(
            NOW, 0, session_id=1, token_id=0, amount=Decimal("2.5"), token_decimals=6
        )
        assert action.kind.amount == 2_500_000

    def test_zero_amount_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            build_withdraw(
                NOW, 0, session_id=1, token_id=0, amount=Decimal(0), token_decimals=6
            )
        assert _kind_of(exc_info) is ValidationErrorKind.NON_POSITIVE_AMOUNT

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            build_withdraw(
                NOW, 0, session_id=1, token_id=0, amount=Decimal(-1), token_decimals=6
            )
        assert _kind_of(exc_info) is ValidationErrorKind.NEGATIVE

    def test_missing_session(self):
        with pytest.raises(ValidationError) as exc_info:
            build_withdraw(
                NOW, 0, session_id=None, token_id=0, amount=1, token_decimals=6
            )
        assert _kind_of(exc_info) is ValidationErrorKind.MISSING_REFERENCE


# ---------------------------------------------------------------------------
# PlaceOrder
# ---------------------------------------------------------------------------


class TestPlaceOrder:
    def test_scales_with_market_decimals(self):
        action = build_place_order(
            NOW,
            0,
            session_id=1,
            market_id=0,
            side=Side.BID,
            fill_mode=FillMode.LIMIT,
            is_reduce_only=False,
            price_decimals=2,
            size_decimals=6,
            price=Decimal(1),
            size=Decimal(1),
            quote_size=Decimal(1),
        )
        assert action.kind == PlaceOrder(
            session_id=1,
            market_id=0,
            side=Side.BID,
            fill_mode=FillMode.LIMIT,
            is_reduce_only=False,
            price=100,
            size=1_000_000,
            quote_size=U128(lo=100_000_000, hi=0),
        )

    def test_omitted_quantities_are_zero(self):
        action = build_place_order(
            NOW,
            0,
            session_id=1,
            market_id=0,
            side="ask",
            fill_mode="immediate_or_cancel",
            is_reduce_only=True,
            price_decimals=2,
            size_decimals=6,
            size=Decimal("0.5"),
        )
        kind = action.kind
        assert (kind.price, kind.size, kind.quote_size) == (0, 500_000, U128())
        assert kind.side is Side.ASK
        assert kind.fill_mode is FillMode.IMMEDIATE_OR_CANCEL

    def test_large_quote_size_uses_high_word(self):
        action = build_place_order(
            NOW,
            0,
            session_id=1,
            market_id=0,
            side=Side.BID,
            fill_mode=FillMode.POST_ONLY,
            is_reduce_only=False,
            price_decimals=8,
            size_decimals=10,
            quote_size=Decimal(1 << 64),
        )
        assert action.kind.quote_size.value == (1 << 64) * 10**18
        assert action.kind.quote_size.hi > 0

    def test_optional_ids_pass_through(self):
        action = build_place_order(
            NOW,
            0,
            session_id=1,
            market_id=0,
            side=Side.BID,
            fill_mode=FillMode.LIMIT,
            is_reduce_only=False,
            price_decimals=2,
            size_decimals=6,
            sender_account_id=4,
            delegator_account_id=5,
            client_order_id=6,
        )
        kind = action.kind
        assert (
            kind.sender_account_id,
            kind.delegator_account_id,
            kind.client_order_id,
        ) == (4, 5, 6)

    @pytest.mark.parametrize(
        "overrides, kind",
        [
            ({"fill_mode": "good_til_cancel"}, ValidationErrorKind.INVALID_FILL_MODE),
            ({"side": "buy"}, ValidationErrorKind.INVALID_SIDE),
            ({"price": Decimal("0.001")}, ValidationErrorKind.PRECISION_LOSS),
            ({"size": Decimal(-1)}, ValidationErrorKind.NEGATIVE),
            ({"market_id": 1 << 32}, ValidationErrorKind.OUT_OF_RANGE),
            ({"sender_account_id": -1}, ValidationErrorKind.OUT_OF_RANGE),
        ],
    )
    def test_rejects(self, overrides, kind):
        params = {
            "session_id": 1,
            "market_id": 0,
            "side": Side.BID,
            "fill_mode": FillMode.LIMIT,
            "is_reduce_only": False,
            "price_decimals": 2,
            "size_decimals": 6,
            **overrides,
        }
        with pytest.raises(ValidationError) as exc_info:
            build_place_order(NOW, 0, **params)
        assert _kind_of(exc_info) is kind


# ---------------------------------------------------------------------------
# CancelOrderById / Transfer
# ---------------------------------------------------------------------------


class TestCancelAndTransfer:
    def test_cancel_order(self):
        action = build_cancel_order(NOW, 0, session_id=1, order_id=99)
        assert action.kind.order_id == 99
        assert action.kind.sender_account_id is None
        assert action.kind.delegator_account_id is None

    def test_transfer_to_new_account(self):
        action = build_transfer(
            NOW,
            0,
            session_id=1,
            from_account_id=0,
            token_id=0,
            token_decimals=6,
            amount=Decimal("10"),
        )
        assert action.kind.amount == 10_000_000
        assert action.kind.to_account_id is None

    def test_transfer_to_existing_account(self):
        action = build_transfer(
            NOW,
            0,
            session_id=1,
            from_account_id=0,
            token_id=0,
            token_decimals=6,
            amount=Decimal("0.000001"),
            to_account_id=2,
        )
        assert (action.kind.amount, action.kind.to_account_id) == (1, 2)

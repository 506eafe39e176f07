"""Builders for each action variant.

Each builder validates its parameters and scales decimal quantities before
constructing the immutable ``Action``. Nothing here touches the network, so
every failure is a ValidationError raised before any I/O.
"""

from decimal import Decimal

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
from nord.exceptions import ValidationError, ValidationErrorKind
from nord.scaling import DecimalLike, split_u128, to_scaled_u64, to_scaled_u128
from nord.types import FillMode, KeyType, Side, check_pubkey_length

# Ten minutes in timestamp ticks (milliseconds * 10000).
SESSION_TTL = 10 * 60 * 1000 * 10_000

ZERO = Decimal(0)


def _check_uint(name: str, value: int | None, bits: int) -> int:
    if value is None:
        raise ValidationError(
            ValidationErrorKind.MISSING_REFERENCE, f"{name} is required"
        )
    if value < 0 or value >= 1 << bits:
        raise ValidationError(
            ValidationErrorKind.OUT_OF_RANGE,
            f"{name}={value} does not fit an unsigned {bits}-bit integer",
        )
    return value


def _check_optional_uint(name: str, value: int | None, bits: int) -> int | None:
    return None if value is None else _check_uint(name, value, bits)


def _action(current_timestamp: int, nonce: int, kind: ActionKind) -> Action:
    return Action(
        current_timestamp=_check_uint("current_timestamp", current_timestamp, 64),
        nonce=_check_uint("nonce", nonce, 32),
        kind=kind,
    )


def _coerce_side(side: Side | str) -> Side:
    try:
        return Side(side)
    except ValueError as exc:
        raise ValidationError(
            ValidationErrorKind.INVALID_SIDE, f"invalid side {side!r}"
        ) from exc


def _coerce_fill_mode(fill_mode: FillMode | str) -> FillMode:
    try:
        return FillMode(fill_mode)
    except ValueError as exc:
        raise ValidationError(
            ValidationErrorKind.INVALID_FILL_MODE, f"invalid fill mode {fill_mode!r}"
        ) from exc


def build_create_session(
    current_timestamp: int,
    nonce: int,
    *,
    user_pubkey: bytes,
    session_pubkey: bytes,
    expiry_timestamp: int | None = None,
) -> Action:
    """Build a CreateSession action.

    Args:
        user_pubkey: Compressed secp256k1 wallet public key (33 bytes).
        session_pubkey: Ed25519 session public key (32 bytes).
        expiry_timestamp: Session expiry; defaults to
            ``current_timestamp + SESSION_TTL``.

    Raises:
        ValidationError: INVALID_KEY_LENGTH, EXPIRY_IN_PAST.
    """
    check_pubkey_length(KeyType.SECP256K1, user_pubkey)
    check_pubkey_length(KeyType.ED25519, session_pubkey)

    if expiry_timestamp is None:
        expiry = current_timestamp + SESSION_TTL
    elif expiry_timestamp > current_timestamp:
        expiry = expiry_timestamp
    else:
        raise ValidationError(
            ValidationErrorKind.EXPIRY_IN_PAST,
            f"cannot set expiry timestamp {expiry_timestamp} in the past "
            f"(now {current_timestamp})",
        )

    return _action(
        current_timestamp,
        nonce,
        CreateSession(
            user_pubkey=bytes(user_pubkey),
            session_pubkey=bytes(session_pubkey),
            expiry_timestamp=_check_uint("expiry_timestamp", expiry, 64),
        ),
    )


def build_revoke_session(current_timestamp: int, nonce: int, *, session_id: int) -> Action:
    return _action(
        current_timestamp,
        nonce,
        RevokeSession(session_id=_check_uint("session_id", session_id, 64)),
    )


def build_withdraw(
    current_timestamp: int,
    nonce: int,
    *,
    session_id: int,
    token_id: int,
    amount: DecimalLike,
    token_decimals: int,
) -> Action:
    """Build a Withdraw action. The scaled amount must be strictly positive."""
    scaled = to_scaled_u64(amount, token_decimals)
    if scaled <= 0:
        raise ValidationError(
            ValidationErrorKind.NON_POSITIVE_AMOUNT,
            f"withdraw amount must be positive, got {amount}",
        )

    return _action(
        current_timestamp,
        nonce,
        Withdraw(
            session_id=_check_uint("session_id", session_id, 64),
            token_id=_check_uint("token_id", token_id, 32),
            amount=scaled,
        ),
    )


def build_place_order(
    current_timestamp: int,
    nonce: int,
    *,
    session_id: int,
    market_id: int,
    side: Side | str,
    fill_mode: FillMode | str,
    is_reduce_only: bool,
    price_decimals: int,
    size_decimals: int,
    price: DecimalLike | None = None,
    size: DecimalLike | None = None,
    quote_size: DecimalLike | None = None,
    sender_account_id: int | None = None,
    delegator_account_id: int | None = None,
    client_order_id: int | None = None,
) -> Action:
    """Build a PlaceOrder action.

    ``price`` and ``size`` are scaled to 64 bits by the market's price and
    size decimals. ``quote_size`` is scaled to 128 bits by their sum and
    split into two words. Omitted quantities are zero. A size of 1 means one
    whole unit of the base asset (e.g. 1 BTC).

    ``delegator_account_id`` places the order on behalf of an account under
    liquidation.
    """
    scaled_price = to_scaled_u64(price if price is not None else ZERO, price_decimals)
    scaled_size = to_scaled_u64(size if size is not None else ZERO, size_decimals)
    scaled_quote = to_scaled_u128(
        quote_size if quote_size is not None else ZERO,
        price_decimals + size_decimals,
    )

    return _action(
        current_timestamp,
        nonce,
        PlaceOrder(
            session_id=_check_uint("session_id", session_id, 64),
            market_id=_check_uint("market_id", market_id, 32),
            side=_coerce_side(side),
            fill_mode=_coerce_fill_mode(fill_mode),
            is_reduce_only=bool(is_reduce_only),
            price=scaled_price,
            size=scaled_size,
            quote_size=split_u128(scaled_quote),
            sender_account_id=_check_optional_uint(
                "sender_account_id", sender_account_id, 32
            ),
            delegator_account_id=_check_optional_uint(
                "delegator_account_id", delegator_account_id, 32
            ),
            client_order_id=_check_optional_uint("client_order_id", client_order_id, 64),
        ),
    )


def build_cancel_order(
    current_timestamp: int,
    nonce: int,
    *,
    session_id: int,
    order_id: int,
    sender_account_id: int | None = None,
    delegator_account_id: int | None = None,
) -> Action:
    return _action(
        current_timestamp,
        nonce,
        CancelOrderById(
            session_id=_check_uint("session_id", session_id, 64),
            order_id=_check_uint("order_id", order_id, 64),
            sender_account_id=_check_optional_uint(
                "sender_account_id", sender_account_id, 32
            ),
            delegator_account_id=_check_optional_uint(
                "delegator_account_id", delegator_account_id, 32
            ),
        ),
    )


def build_transfer(
    current_timestamp: int,
    nonce: int,
    *,
    session_id: int,
    from_account_id: int,
    token_id: int,
    token_decimals: int,
    amount: DecimalLike,
    to_account_id: int | None = None,
) -> Action:
    """Build a Transfer action.

    Leaving ``to_account_id`` unset asks the server to create a new account
    for the recipient.
    """
    return _action(
        current_timestamp,
        nonce,
        Transfer(
            session_id=_check_uint("session_id", session_id, 64),
            from_account_id=_check_uint("from_account_id", from_account_id, 32),
            token_id=_check_uint("token_id", token_id, 32),
            amount=to_scaled_u64(amount, token_decimals),
            to_account_id=_check_optional_uint("to_account_id", to_account_id, 32),
        ),
    )

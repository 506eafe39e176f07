"""Protocol-buffer schema for the action channel.

The schema is assembled from descriptor protos at import time and registered
in a private descriptor pool, so no protoc step is needed. Equivalent .proto:

    syntax = "proto3";
    package nord;

    message U128 { uint64 lo = 1; uint64 hi = 2; }
    enum Side { ASK = 0; BID = 1; }
    enum FillMode { LIMIT = 0; POST_ONLY = 1; IMMEDIATE_OR_CANCEL = 2; FILL_OR_KILL = 3; }
    enum Error { DUPLICATE = 0; DECODE_FAILURE = 1; ... }

    message Action {
      uint64 current_timestamp = 1;
      uint32 nonce = 2;
      oneof kind { CreateSession create_session = 3; ... Transfer transfer = 8; }
    }
    message Receipt {
      uint64 action_id = 1;
      oneof kind { Error err = 2; ... Transferred transferred = 8; }
    }

Nested messages are listed in ``_ACTION_KINDS`` / ``_RECEIPT_KINDS`` below.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.internal.enum_type_wrapper import EnumTypeWrapper

_PACKAGE = "nord"

_F = descriptor_pb2.FieldDescriptorProto
UINT32 = _F.TYPE_UINT32
UINT64 = _F.TYPE_UINT64
BOOL = _F.TYPE_BOOL
BYTES = _F.TYPE_BYTES
MESSAGE = _F.TYPE_MESSAGE
ENUM = _F.TYPE_ENUM

# Server error codes. Provisional: this table is not yet synced with the
# server's nord.proto, so a name is only a hint and the numeric code is what
# callers should act on. Codes outside the table surface as UNKNOWN_<code>.
ERROR_CODES: dict[str, int] = {
    "DUPLICATE": 0,
    "DECODE_FAILURE": 1,
    "INVALID_SIGNATURE": 2,
    "INVALID_NONCE": 3,
    "TIMESTAMP_OUT_OF_WINDOW": 4,
    "SESSION_NOT_FOUND": 5,
    "SESSION_EXPIRED": 6,
    "ACCOUNT_NOT_FOUND": 7,
    "MARKET_NOT_FOUND": 8,
    "TOKEN_NOT_FOUND": 9,
    "ORDER_NOT_FOUND": 10,
    "INSUFFICIENT_BALANCE": 11,
    "INVALID_AMOUNT": 12,
    "INVALID_PRICE": 13,
    "INVALID_SIZE": 14,
    "POST_ONLY_WOULD_TRADE": 15,
    "FILL_OR_KILL_NOT_FILLED": 16,
    "REDUCE_ONLY_VIOLATED": 17,
    "RISK_CHECK_FAILED": 18,
    "NOT_LIQUIDATABLE": 19,
    "ACCESS_DENIED": 20,
}

_ERROR_NAMES = {code: name for name, code in ERROR_CODES.items()}


def error_name(code: int) -> str:
    """Symbolic name of a server error code."""
    return _ERROR_NAMES.get(code, f"UNKNOWN_{code}")


# (name, number, type, type_name, optional)
_FieldSpec = tuple[str, int, int, str | None, bool]

_ACTION_KINDS: list[tuple[str, str, list[_FieldSpec]]] = [
    (
        "CreateSession",
        "create_session",
        [
            ("user_pubkey", 1, BYTES, None, False),
            ("blst_pubkey", 2, BYTES, None, False),
            ("expiry_timestamp", 3, UINT64, None, False),
        ],
    ),
    (
        "RevokeSession",
        "revoke_session",
        [("session_id", 1, UINT64, None, False)],
    ),
    (
        "Withdraw",
        "withdraw",
        [
            ("session_id", 1, UINT64, None, False),
            ("token_id", 2, UINT32, None, False),
            ("amount", 3, UINT64, None, False),
        ],
    ),
    (
        "PlaceOrder",
        "place_order",
        [
            ("session_id", 1, UINT64, None, False),
            ("sender_account_id", 2, UINT32, None, True),
            ("market_id", 3, UINT32, None, False),
            ("side", 4, ENUM, ".nord.Side", False),
            ("fill_mode", 5, ENUM, ".nord.FillMode", False),
            ("is_reduce_only", 6, BOOL, None, False),
            ("price", 7, UINT64, None, False),
            ("size", 8, UINT64, None, False),
            ("quote_size", 9, MESSAGE, ".nord.U128", False),
            ("delegator_account_id", 10, UINT32, None, True),
            ("client_order_id", 11, UINT64, None, True),
        ],
    ),
    (
        "CancelOrderById",
        "cancel_order_by_id",
        [
            ("session_id", 1, UINT64, None, False),
            ("sender_account_id", 2, UINT32, None, True),
            ("order_id", 3, UINT64, None, False),
            ("delegator_account_id", 4, UINT32, None, True),
        ],
    ),
    (
        "Transfer",
        "transfer",
        [
            ("session_id", 1, UINT64, None, False),
            ("from_account_id", 2, UINT32, None, False),
            ("to_account_id", 3, UINT32, None, True),
            ("token_id", 4, UINT32, None, False),
            ("amount", 5, UINT64, None, False),
        ],
    ),
]

_RECEIPT_KINDS: list[tuple[str, str, list[_FieldSpec]]] = [
    (
        "CreateSessionResult",
        "create_session_result",
        [("session_id", 1, UINT64, None, False)],
    ),
    ("SessionRevoked", "session_revoked", []),
    ("WithdrawResult", "withdraw_result", []),
    (
        "PlaceOrderResult",
        "place_order_result",
        [("posted", 1, MESSAGE, ".nord.Receipt.Posted", False)],
    ),
    (
        "CancelOrderResult",
        "cancel_order_result",
        [("order_id", 1, UINT64, None, False)],
    ),
    (
        "Transferred",
        "transferred",
        [
            ("from_account_id", 1, UINT32, None, False),
            ("to_account_id", 2, UINT32, None, False),
            ("token_id", 3, UINT32, None, False),
            ("amount", 4, UINT64, None, False),
            ("account_created", 5, BOOL, None, False),
        ],
    ),
]


def _add_field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    type_name: str | None = None,
    optional: bool = False,
    oneof_index: int | None = None,
) -> None:
    field = message.field.add(
        name=name, number=number, type=field_type, label=_F.LABEL_OPTIONAL
    )
    if type_name is not None:
        field.type_name = type_name
    if oneof_index is not None:
        field.oneof_index = oneof_index
    elif optional:
        # proto3 `optional` is a synthetic single-field oneof declared after
        # all real oneofs.
        field.proto3_optional = True
        field.oneof_index = len(message.oneof_decl)
        message.oneof_decl.add(name=f"_{name}")


def _add_message(
    parent: descriptor_pb2.DescriptorProto, name: str, fields: list[_FieldSpec]
) -> None:
    nested = parent.nested_type.add(name=name)
    for field_name, number, field_type, type_name, optional in fields:
        _add_field(nested, field_name, number, field_type, type_name, optional)


def _add_enum(
    file_proto: descriptor_pb2.FileDescriptorProto, name: str, values: dict[str, int]
) -> None:
    enum = file_proto.enum_type.add(name=name)
    for value_name, number in values.items():
        enum.value.add(name=value_name, number=number)


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="nord.proto", package=_PACKAGE, syntax="proto3"
    )

    u128 = file_proto.message_type.add(name="U128")
    _add_field(u128, "lo", 1, UINT64)
    _add_field(u128, "hi", 2, UINT64)

    _add_enum(file_proto, "Side", {"ASK": 0, "BID": 1})
    _add_enum(
        file_proto,
        "FillMode",
        {"LIMIT": 0, "POST_ONLY": 1, "IMMEDIATE_OR_CANCEL": 2, "FILL_OR_KILL": 3},
    )
    _add_enum(file_proto, "Error", ERROR_CODES)

    action = file_proto.message_type.add(name="Action")
    action.oneof_decl.add(name="kind")
    _add_field(action, "current_timestamp", 1, UINT64)
    _add_field(action, "nonce", 2, UINT32)
    for number, (type_name, field_name, fields) in enumerate(_ACTION_KINDS, start=3):
        _add_message(action, type_name, fields)
        _add_field(
            action, field_name, number, MESSAGE, f".nord.Action.{type_name}",
            oneof_index=0,
        )

    receipt = file_proto.message_type.add(name="Receipt")
    receipt.oneof_decl.add(name="kind")
    _add_message(receipt, "Posted", [("order_id", 1, UINT64, None, False)])
    _add_field(receipt, "action_id", 1, UINT64)
    _add_field(receipt, "err", 2, ENUM, ".nord.Error", oneof_index=0)
    for number, (type_name, field_name, fields) in enumerate(_RECEIPT_KINDS, start=3):
        _add_message(receipt, type_name, fields)
        _add_field(
            receipt, field_name, number, MESSAGE, f".nord.Receipt.{type_name}",
            oneof_index=0,
        )

    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())

Action = message_factory.GetMessageClass(_pool.FindMessageTypeByName("nord.Action"))
Receipt = message_factory.GetMessageClass(_pool.FindMessageTypeByName("nord.Receipt"))
U128 = message_factory.GetMessageClass(_pool.FindMessageTypeByName("nord.U128"))
Side = EnumTypeWrapper(_pool.FindEnumTypeByName("nord.Side"))
FillMode = EnumTypeWrapper(_pool.FindEnumTypeByName("nord.FillMode"))

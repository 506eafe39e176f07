"""Length-delimited framing for protocol-buffer messages.

Every message on the action channel is prefixed with its payload length as
a base-128 varint. Payloads over MAX_PAYLOAD_SIZE are rejected in both
directions. Trailing bytes after the declared payload are ignored.
"""

from typing import TypeVar

from google.protobuf.internal.decoder import _DecodeVarint
from google.protobuf.internal.encoder import _VarintBytes
from google.protobuf.message import DecodeError, Message

from nord.exceptions import ProtocolError, ProtocolErrorKind

MAX_PAYLOAD_SIZE = 100 * 1024  # 100 kB

M = TypeVar("M", bound=Message)


def encode_length_delimited(message: Message) -> bytes:
    """Serialize a message and prefix it with its varint-encoded length.

    Raises:
        ProtocolError: OVERSIZE if the payload exceeds MAX_PAYLOAD_SIZE.
    """
    payload = message.SerializeToString()
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ProtocolError(
            ProtocolErrorKind.OVERSIZE,
            f"encoded message size ({len(payload)} bytes) is greater than "
            f"max payload size ({MAX_PAYLOAD_SIZE} bytes)",
        )
    return _VarintBytes(len(payload)) + payload


def decode_length_delimited(data: bytes, message_type: type[M]) -> M:
    """Read a varint length prefix, then parse exactly that many bytes.

    Raises:
        ProtocolError: OVERSIZE if the declared length exceeds
            MAX_PAYLOAD_SIZE, TRUNCATED if the buffer holds fewer bytes than
            declared, MALFORMED if the prefix or the payload does not parse.
    """
    data = bytes(data)
    try:
        length, start = _DecodeVarint(data, 0)
    except IndexError as exc:
        raise ProtocolError(
            ProtocolErrorKind.TRUNCATED, "buffer ends inside the length prefix"
        ) from exc
    except DecodeError as exc:
        raise ProtocolError(
            ProtocolErrorKind.MALFORMED, f"invalid length prefix: {exc}"
        ) from exc

    if length > MAX_PAYLOAD_SIZE:
        raise ProtocolError(
            ProtocolErrorKind.OVERSIZE,
            f"encoded message size ({length} bytes) is greater than "
            f"max payload size ({MAX_PAYLOAD_SIZE} bytes)",
        )

    remaining = len(data) - start
    if length > remaining:
        raise ProtocolError(
            ProtocolErrorKind.TRUNCATED,
            f"encoded message size ({length} bytes) is greater than "
            f"remaining buffer size ({remaining} bytes)",
        )

    message = message_type()
    try:
        message.ParseFromString(data[start : start + length])
    except DecodeError as exc:
        raise ProtocolError(
            ProtocolErrorKind.MALFORMED,
            f"cannot parse {message_type.DESCRIPTOR.name}: {exc}",
        ) from exc
    return message

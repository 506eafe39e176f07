"""Wire layer -- protocol-buffer schema and length-delimited framing."""

from nord.wire.codec import (
    MAX_PAYLOAD_SIZE,
    decode_length_delimited,
    encode_length_delimited,
)

__all__ = ["MAX_PAYLOAD_SIZE", "decode_length_delimited", "encode_length_delimited"]

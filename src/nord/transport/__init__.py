"""Transport layer -- byte channels and action submission."""

from nord.transport.channel import ByteChannel, HttpByteChannel
from nord.transport.submit import submit

__all__ = ["ByteChannel", "HttpByteChannel", "submit"]

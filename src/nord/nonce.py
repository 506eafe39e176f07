"""Action timestamps and nonces.

Timestamps are integers in 100 ns ticks (milliseconds * 10000). The server
requires ``(current_timestamp, nonce)`` to be unique per user, so actions
issued within the same tick get strictly increasing nonces.
"""

import time

TICKS_PER_MILLISECOND = 10_000


def now_timestamp() -> int:
    """Current wall-clock time in timestamp ticks."""
    return time.time_ns() // 100


class NonceGenerator:
    """Per-caller ``(last_timestamp, last_nonce)`` counter.

    ``next()`` is synchronous, so a coroutine that draws its nonce before its
    first ``await`` cannot interleave with another draw on the same event
    loop. It is NOT safe to share one generator between threads.
    """

    def __init__(self) -> None:
        self._last_timestamp: int | None = None
        self._last_nonce = 0

    def next(self, timestamp: int) -> int:
        """Return the nonce for an action issued at ``timestamp``.

        The first action of a tick gets 0; later ones in the same tick count up.
        """
        if timestamp == self._last_timestamp:
            self._last_nonce += 1
        else:
            self._last_timestamp = timestamp
            self._last_nonce = 0
        return self._last_nonce

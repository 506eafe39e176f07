"""Shared test fixtures for the Nord client."""

import pytest

from nord.actions.receipts import Receipt, ReceiptKind
from nord.signing.keys import Ed25519SessionSigner, EthWalletSigner
from nord.transport.channel import ByteChannel
from nord.types import Market, Token
from nord.wire.convert import encode_receipt

WALLET_KEY = "0x" + "4c" * 32
SESSION_SEED = bytes(range(32))
NOW = 17_000_000_000_000_000


class FakeChannel(ByteChannel):
    """In-memory channel: records sent bodies, replays queued receipts."""

    def __init__(self) -> None:
        self.sent: list[bytes] = []
        self._responses: list[bytes] = []
        self._next_action_id = 1

    def queue(self, kind: ReceiptKind) -> None:
        self._responses.append(
            encode_receipt(Receipt(action_id=self._next_action_id, kind=kind))
        )
        self._next_action_id += 1

    def queue_raw(self, data: bytes) -> None:
        self._responses.append(data)

    async def send(self, payload: bytes) -> bytes:
        self.sent.append(payload)
        return self._responses.pop(0)


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def wallet_signer() -> EthWalletSigner:
    return EthWalletSigner(WALLET_KEY)


@pytest.fixture
def session_signer() -> Ed25519SessionSigner:
    return Ed25519SessionSigner(SESSION_SEED)


@pytest.fixture
def tokens() -> list[Token]:
    """USDC (6 decimals), BTC (8), ETH (18), indexed by token id."""
    return [
        Token(symbol="USDC", token_id=0, decimals=6),
        Token(symbol="BTC", token_id=1, decimals=8),
        Token(symbol="ETH", token_id=2, decimals=18),
    ]


@pytest.fixture
def markets() -> list[Market]:
    """BTCUSDC and ETHUSDC, indexed by market id."""
    return [
        Market(
            symbol="BTCUSDC",
            market_id=0,
            base_token_id=1,
            quote_token_id=0,
            price_decimals=2,
            size_decimals=6,
        ),
        Market(
            symbol="ETHUSDC",
            market_id=1,
            base_token_id=2,
            quote_token_id=0,
            price_decimals=3,
            size_decimals=4,
        ),
    ]

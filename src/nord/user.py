"""Stateful user client over the action pipeline.

NordUser owns the caller-side state the pipeline itself never tracks: the
current session id, the user's public key, known account ids and the nonce
counter. Every method draws its ``(timestamp, nonce)`` pair synchronously,
right before building the action, so concurrent coroutines on one event
loop never reuse a nonce.
"""

from collections.abc import Callable
from typing import cast

from nord.actions.builder import (
    build_cancel_order,
    build_create_session,
    build_place_order,
    build_revoke_session,
    build_transfer,
    build_withdraw,
)
from nord.actions.receipts import (
    OrderCancelled,
    OrderPlaced,
    SessionCreated,
    Transferred,
)
from nord.config import NordSettings
from nord.exceptions import (
    ProtocolError,
    ProtocolErrorKind,
    ValidationError,
    ValidationErrorKind,
)
from nord.logging import get_logger
from nord.nonce import NonceGenerator, now_timestamp
from nord.scaling import DecimalLike
from nord.signing.keys import (
    Ed25519SessionSigner,
    EthWalletSigner,
    recover_wallet_public_key,
)
from nord.signing.signer import SessionSigner, WalletSigner
from nord.transport.channel import ByteChannel, HttpByteChannel
from nord.transport.submit import submit
from nord.types import FillMode, Market, Side, Token, find_market, find_token

logger = get_logger(__name__)


class NordUser:
    """A user trading through one wallet key and one session key.

    Args:
        channel: Transport for submitted actions.
        wallet_signer: Signs session lifecycle actions.
        session_signer: Signs trading and asset actions.
        markets: Markets indexed by market id.
        tokens: Tokens indexed by token id.
        clock: Returns the current timestamp in ticks.
        user_pubkey: Compressed wallet public key; recovered from the wallet
            signer on first use when omitted.
    """

    def __init__(
        self,
        channel: ByteChannel,
        wallet_signer: WalletSigner,
        session_signer: SessionSigner,
        markets: list[Market],
        tokens: list[Token],
        clock: Callable[[], int] = now_timestamp,
        user_pubkey: bytes | None = None,
    ) -> None:
        self._channel = channel
        self._wallet_signer = wallet_signer
        self._session_signer = session_signer
        self._markets = markets
        self._tokens = tokens
        self._clock = clock
        self._nonces = NonceGenerator()
        self._owns_channel = False

        self.user_pubkey = user_pubkey
        self.session_id: int | None = None
        self.account_ids: list[int] = []

    @classmethod
    def from_settings(
        cls, settings: NordSettings, markets: list[Market], tokens: list[Token]
    ) -> "NordUser":
        """Wire an HTTP channel and local key signers from settings.

        Raises:
            ValueError: If no wallet private key is configured.
        """
        wallet_key = settings.wallet_private_key.get_secret_value()
        if not wallet_key:
            raise ValueError("NORD_WALLET_PRIVATE_KEY is not configured")
        wallet_signer = EthWalletSigner(wallet_key)

        session_key = settings.session_private_key.get_secret_value()
        if session_key:
            session_signer = Ed25519SessionSigner(session_key)
        else:
            logger.info("generating_session_key")
            session_signer = Ed25519SessionSigner.generate()

        user = cls(
            channel=HttpByteChannel(
                settings.web_server_url, settings.request_timeout_seconds
            ),
            wallet_signer=wallet_signer,
            session_signer=session_signer,
            markets=markets,
            tokens=tokens,
            user_pubkey=wallet_signer.public_key,
        )
        user._owns_channel = True
        return user

    async def close(self) -> None:
        """Close the channel if this user created it."""
        if self._owns_channel and isinstance(self._channel, HttpByteChannel):
            await self._channel.close()

    def _next_envelope(self) -> tuple[int, int]:
        timestamp = self._clock()
        return timestamp, self._nonces.next(timestamp)

    def _require_session(self) -> int:
        if self.session_id is None:
            raise ValidationError(
                ValidationErrorKind.MISSING_REFERENCE,
                "no session, call refresh_session() first",
            )
        return self.session_id

    async def _ensure_public_key(self) -> bytes:
        if self.user_pubkey is None:
            self.user_pubkey = await recover_wallet_public_key(self._wallet_signer)
        return self.user_pubkey

    async def refresh_session(
        self,
        session_pubkey: bytes | None = None,
        expiry_timestamp: int | None = None,
    ) -> int:
        """Create a new session for the session key and make it current.

        Args:
            session_pubkey: Ed25519 public key of the session signer. May be
                omitted when the session signer is an Ed25519SessionSigner.
            expiry_timestamp: Optional explicit expiry in ticks.

        Returns:
            The new session id.
        """
        if session_pubkey is None:
            if not isinstance(self._session_signer, Ed25519SessionSigner):
                raise ValidationError(
                    ValidationErrorKind.MISSING_REFERENCE,
                    "session_pubkey is required for this session signer",
                )
            session_pubkey = self._session_signer.public_key

        user_pubkey = await self._ensure_public_key()

        timestamp, nonce = self._next_envelope()
        action = build_create_session(
            timestamp,
            nonce,
            user_pubkey=user_pubkey,
            session_pubkey=session_pubkey,
            expiry_timestamp=expiry_timestamp,
        )
        result = cast(
            SessionCreated, await submit(action, self._wallet_signer, self._channel)
        )

        self.session_id = result.session_id
        logger.info("session_created", session_id=result.session_id)
        return result.session_id

    async def revoke_session(self, session_id: int | None = None) -> None:
        """Revoke a session (the current one by default)."""
        target = session_id if session_id is not None else self._require_session()

        timestamp, nonce = self._next_envelope()
        action = build_revoke_session(timestamp, nonce, session_id=target)
        await submit(action, self._wallet_signer, self._channel)

        if target == self.session_id:
            self.session_id = None
        logger.info("session_revoked", session_id=target)

    async def withdraw(self, token_id: int, amount: DecimalLike) -> None:
        token = find_token(self._tokens, token_id)
        session_id = self._require_session()

        timestamp, nonce = self._next_envelope()
        action = build_withdraw(
            timestamp,
            nonce,
            session_id=session_id,
            token_id=token_id,
            amount=amount,
            token_decimals=token.decimals,
        )
        await submit(action, self._session_signer, self._channel)

    async def place_order(
        self,
        market_id: int,
        side: Side | str,
        fill_mode: FillMode | str,
        is_reduce_only: bool,
        size: DecimalLike | None = None,
        price: DecimalLike | None = None,
        quote_size: DecimalLike | None = None,
        account_id: int | None = None,
        liquidatee_id: int | None = None,
        client_order_id: int | None = None,
    ) -> int | None:
        """Place an order, scaled with the market's decimals.

        Returns:
            Id of the order resting on the book, or None if it was filled or
            cancelled immediately.
        """
        market = find_market(self._markets, market_id)
        session_id = self._require_session()

        timestamp, nonce = self._next_envelope()
        action = build_place_order(
            timestamp,
            nonce,
            session_id=session_id,
            market_id=market_id,
            side=side,
            fill_mode=fill_mode,
            is_reduce_only=is_reduce_only,
            price_decimals=market.price_decimals,
            size_decimals=market.size_decimals,
            price=price,
            size=size,
            quote_size=quote_size,
            sender_account_id=account_id,
            delegator_account_id=liquidatee_id,
            client_order_id=client_order_id,
        )
        result = cast(
            OrderPlaced, await submit(action, self._session_signer, self._channel)
        )
        return result.order_id

    async def cancel_order(
        self,
        order_id: int,
        account_id: int | None = None,
        liquidatee_id: int | None = None,
    ) -> int:
        """Cancel an order by id and return the cancelled order's id."""
        session_id = self._require_session()

        timestamp, nonce = self._next_envelope()
        action = build_cancel_order(
            timestamp,
            nonce,
            session_id=session_id,
            order_id=order_id,
            sender_account_id=account_id,
            delegator_account_id=liquidatee_id,
        )
        result = cast(
            OrderCancelled, await submit(action, self._session_signer, self._channel)
        )
        return result.order_id

    async def transfer_to_account(
        self,
        token_id: int,
        amount: DecimalLike,
        from_account_id: int,
        to_account_id: int,
    ) -> None:
        await self._transfer(token_id, amount, from_account_id, to_account_id)

    async def create_account(
        self,
        token_id: int,
        amount: DecimalLike,
        from_account_id: int | None = None,
    ) -> int:
        """Fund a new account by transferring into it.

        Transfers from ``from_account_id`` (the first known account by
        default) without a recipient, so the server allocates the account.

        Returns:
            The new account id, also appended to ``account_ids``.
        """
        if from_account_id is None:
            if not self.account_ids:
                raise ValidationError(
                    ValidationErrorKind.MISSING_REFERENCE, "no source account"
                )
            from_account_id = self.account_ids[0]

        result = await self._transfer(token_id, amount, from_account_id, None)
        if not result.account_created:
            raise ProtocolError(
                ProtocolErrorKind.UNEXPECTED_RECEIPT_KIND,
                "new account should have been created",
            )

        self.account_ids.append(result.to_account_id)
        logger.info("account_created", account_id=result.to_account_id)
        return result.to_account_id

    async def _transfer(
        self,
        token_id: int,
        amount: DecimalLike,
        from_account_id: int,
        to_account_id: int | None,
    ) -> Transferred:
        token = find_token(self._tokens, token_id)
        session_id = self._require_session()

        timestamp, nonce = self._next_envelope()
        action = build_transfer(
            timestamp,
            nonce,
            session_id=session_id,
            from_account_id=from_account_id,
            token_id=token_id,
            token_decimals=token.decimals,
            amount=amount,
            to_account_id=to_account_id,
        )
        return cast(
            Transferred, await submit(action, self._session_signer, self._channel)
        )

"""Signer interfaces and the two action signing schemes.

Session lifecycle actions (CreateSession, RevokeSession) are signed by the
user's wallet key; every other action is signed by the session key the
wallet authorized. The scheme is chosen by action kind, never by a flag.

The client never holds key material itself: signers are injected.
"""

from abc import ABC, abstractmethod

from nord.actions.models import Action, is_session_lifecycle


class WalletSigner(ABC):
    """Wallet-level signing capability (secp256k1, Ethereum personal message)."""

    @abstractmethod
    async def sign_message(self, message: bytes) -> bytes:
        """Hash and sign ``message``, returning a 65-byte recoverable
        signature laid out as ``r || s || v``."""
        ...


class SessionSigner(ABC):
    """Session-level signing capability (Ed25519)."""

    @abstractmethod
    async def sign(self, message: bytes) -> bytes:
        """Sign ``message`` directly and return the 64-byte signature."""
        ...


async def wallet_sign(signer: WalletSigner, message: bytes) -> bytes:
    """Return ``message || signature`` with the recovery byte stripped."""
    signature = await signer.sign_message(message)
    return message + signature[:-1]


async def session_sign(signer: SessionSigner, message: bytes) -> bytes:
    """Return ``message || signature``."""
    signature = await signer.sign(message)
    return message + signature


async def authenticate(
    action: Action, encoded: bytes, signer: WalletSigner | SessionSigner
) -> bytes:
    """Authenticate an encoded action with the scheme its kind requires.

    Raises:
        TypeError: If ``signer`` is not of the category the action needs.
    """
    if is_session_lifecycle(action.kind):
        if not isinstance(signer, WalletSigner):
            raise TypeError(
                f"{type(action.kind).__name__} must be signed by a WalletSigner, "
                f"got {type(signer).__name__}"
            )
        return await wallet_sign(signer, encoded)

    if not isinstance(signer, SessionSigner):
        raise TypeError(
            f"{type(action.kind).__name__} must be signed by a SessionSigner, "
            f"got {type(signer).__name__}"
        )
    return await session_sign(signer, encoded)

"""Signing layer -- wallet and session signing schemes."""

from nord.signing.keys import (
    Ed25519SessionSigner,
    EthWalletSigner,
    recover_wallet_public_key,
    sign_action,
)
from nord.signing.signer import (
    SessionSigner,
    WalletSigner,
    authenticate,
    session_sign,
    wallet_sign,
)

__all__ = [
    "Ed25519SessionSigner",
    "EthWalletSigner",
    "SessionSigner",
    "WalletSigner",
    "authenticate",
    "recover_wallet_public_key",
    "session_sign",
    "sign_action",
    "wallet_sign",
]

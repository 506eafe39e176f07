"""Key-backed signer implementations.

EthWalletSigner signs like an Ethereum wallet's ``personal_sign``: the
message is wrapped in the EIP-191 prefix, hashed with keccak256 and signed
with secp256k1. Ed25519SessionSigner holds an in-memory session key.
"""

import hashlib

from eth_account import Account
from eth_account.messages import defunct_hash_message, encode_defunct
from eth_keys import keys
from nacl.signing import SigningKey

from nord.exceptions import ValidationError, ValidationErrorKind
from nord.signing.signer import SessionSigner, WalletSigner
from nord.types import KeyType

# Fixed message signed to recover a wallet's public key.
WALLET_KEY_MESSAGE = b"Layer N - Nord"


def _key_bytes(key: bytes | str) -> bytes:
    if isinstance(key, str):
        return bytes.fromhex(key.removeprefix("0x"))
    return bytes(key)


class EthWalletSigner(WalletSigner):
    """Wallet signer backed by a local secp256k1 private key.

    Args:
        private_key: Raw 32-byte key or hex string (``0x`` prefix optional).
    """

    def __init__(self, private_key: bytes | str) -> None:
        self._account = Account.from_key(_key_bytes(private_key))

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def public_key(self) -> bytes:
        """Compressed 33-byte secp256k1 public key."""
        return keys.PrivateKey(bytes(self._account.key)).public_key.to_compressed_bytes()

    async def sign_message(self, message: bytes) -> bytes:
        signed = self._account.sign_message(encode_defunct(primitive=message))
        return bytes(signed.signature)


class Ed25519SessionSigner(SessionSigner):
    """Session signer backed by an Ed25519 key.

    Args:
        seed: 32-byte private seed, raw or hex.
    """

    def __init__(self, seed: bytes | str) -> None:
        self._key = SigningKey(_key_bytes(seed))

    @classmethod
    def generate(cls) -> "Ed25519SessionSigner":
        """Create a signer with a fresh random session key."""
        return cls(bytes(SigningKey.generate()))

    @property
    def public_key(self) -> bytes:
        """Raw 32-byte Ed25519 public key."""
        return self._key.verify_key.encode()

    async def sign(self, message: bytes) -> bytes:
        return self._key.sign(message).signature


async def recover_wallet_public_key(signer: WalletSigner) -> bytes:
    """Recover the compressed public key behind any wallet signer.

    Signs WALLET_KEY_MESSAGE and recovers the key from the signature, so it
    works for signers that never expose their key.
    """
    signature = await signer.sign_message(WALLET_KEY_MESSAGE)
    v = signature[64]
    if v >= 27:
        v -= 27
    recoverable = keys.Signature(signature_bytes=signature[:64] + bytes([v]))
    msg_hash = defunct_hash_message(primitive=WALLET_KEY_MESSAGE)
    public_key = recoverable.recover_public_key_from_msg_hash(bytes(msg_hash))
    return public_key.to_compressed_bytes()


def sign_action(message: bytes, secret_key: bytes, key_type: KeyType) -> bytes:
    """Sign raw action bytes with a secret key and append the signature.

    Ed25519 signs the message directly. Secp256k1 signs its SHA-256 digest and
    appends the 64-byte compact ``r || s`` signature.

    Raises:
        ValidationError: UNSUPPORTED_KEY_TYPE for BLS12-381.
    """
    if key_type is KeyType.ED25519:
        signature = SigningKey(secret_key).sign(message).signature
    elif key_type is KeyType.SECP256K1:
        digest = hashlib.sha256(message).digest()
        signature = keys.PrivateKey(secret_key).sign_msg_hash(digest).to_bytes()[:64]
    else:
        raise ValidationError(
            ValidationErrorKind.UNSUPPORTED_KEY_TYPE,
            f"signing with {key_type.value} keys is not supported",
        )
    return message + signature

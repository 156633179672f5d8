"""
koder_core.crypto
-----------------
RSA-OAEP primitives for koder:

- Key generation: 2048-bit RSA, e=65537, OAEP with SHA-256 (MGF1-SHA-256)
- Key codec: SPKI / PKCS8 DER exports carried as Base64 text
- Cipher: encrypt with a public key, decrypt with a private key,
  Base64 transport helpers for ciphertext

Public and private keys are wrapped in capability-restricted handles:
a PublicKeyHandle can only encrypt and a PrivateKeyHandle can only decrypt.

Every cryptographic call is a coroutine; the blocking `cryptography` work
runs in a worker thread so the event loop keeps serving other tasks.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union
import asyncio, hashlib

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .constants import RSA_KEY_SIZE, RSA_PUBLIC_EXPONENT, OAEP_OVERHEAD
from .errors import (
    CodecError, KeyGenerationError, KeyImportError, KeyExportError,
    MessageTooLargeError, DecryptionError,
)
from .logger import get_logger
from .utils import b64e, b64d

log = get_logger("koder.Crypto")


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def max_plaintext_size(key_size: int = RSA_KEY_SIZE) -> int:
    """Largest OAEP/SHA-256 plaintext, in bytes, for a modulus of `key_size` bits."""
    return (key_size + 7) // 8 - OAEP_OVERHEAD


# --------- Capability-restricted handles ----------
class PublicKeyHandle:
    """Encrypt-only view of an RSA public key."""

    __slots__ = ("_key",)

    def __init__(self, key: rsa.RSAPublicKey):
        if not isinstance(key, rsa.RSAPublicKey):
            raise TypeError(f"PublicKeyHandle needs an RSA public key, got {type(key).__name__}")
        self._key = key

    @property
    def key_size(self) -> int:
        return self._key.key_size

    @property
    def max_plaintext_size(self) -> int:
        return max_plaintext_size(self._key.key_size)

    def encrypt(self, data: bytes) -> bytes:
        if len(data) > self.max_plaintext_size:
            raise MessageTooLargeError(
                f"message is {len(data)} bytes, limit is {self.max_plaintext_size}"
            )
        return self._key.encrypt(data, _oaep())

    def export_der(self) -> bytes:
        return self._key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def fingerprint(self) -> str:
        """
        Stable fingerprint of the public key.

        Hex SHA-256 of the SPKI DER, truncated to 32 chars. Used to correlate
        log lines without logging key material.
        """
        return hashlib.sha256(self.export_der()).hexdigest()[:32]

    def __repr__(self) -> str:
        return f"PublicKeyHandle(key_size={self.key_size}, fpr={self.fingerprint()})"


class PrivateKeyHandle:
    """Decrypt-only view of an RSA private key."""

    __slots__ = ("_key",)

    def __init__(self, key: rsa.RSAPrivateKey):
        if not isinstance(key, rsa.RSAPrivateKey):
            raise TypeError(f"PrivateKeyHandle needs an RSA private key, got {type(key).__name__}")
        self._key = key

    @property
    def key_size(self) -> int:
        return self._key.key_size

    def decrypt(self, ciphertext: bytes) -> bytes:
        try:
            return self._key.decrypt(bytes(ciphertext), _oaep())
        except ValueError as exc:
            raise DecryptionError("decryption failed: wrong key or corrupted ciphertext") from exc

    def export_der(self) -> bytes:
        return self._key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def __repr__(self) -> str:
        # never render key material
        return f"PrivateKeyHandle(key_size={self.key_size})"


@dataclass(frozen=True)
class KeyPair:
    public_key: PublicKeyHandle
    private_key: PrivateKeyHandle


# --------- Key generation ----------
def _generate_rsa() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=RSA_KEY_SIZE)


async def generate_key_pair() -> KeyPair:
    try:
        sk = await asyncio.to_thread(_generate_rsa)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyGenerationError(f"RSA key generation failed: {exc}") from exc
    pair = KeyPair(public_key=PublicKeyHandle(sk.public_key()), private_key=PrivateKeyHandle(sk))
    log.info(f"[KEYGEN] rsa-oaep key_size={RSA_KEY_SIZE} fpr={pair.public_key.fingerprint()}")
    return pair


# --------- Key codec (SPKI / PKCS8 <-> Base64) ----------
async def export_public_key(handle: PublicKeyHandle) -> str:
    if not isinstance(handle, PublicKeyHandle):
        raise KeyExportError(f"expected PublicKeyHandle, got {type(handle).__name__}")
    try:
        der = await asyncio.to_thread(handle.export_der)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyExportError(f"public key export failed: {exc}") from exc
    return b64e(der)


async def export_private_key(handle: PrivateKeyHandle) -> str:
    if not isinstance(handle, PrivateKeyHandle):
        raise KeyExportError(f"expected PrivateKeyHandle, got {type(handle).__name__}")
    try:
        der = await asyncio.to_thread(handle.export_der)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyExportError(f"private key export failed: {exc}") from exc
    return b64e(der)


def _decode_key_text(encoded: str) -> bytes:
    if not isinstance(encoded, str):
        raise KeyImportError(f"encoded key must be str, got {type(encoded).__name__}")
    try:
        return b64d(encoded)
    except CodecError as exc:
        raise KeyImportError(f"encoded key is not valid base64: {exc}") from exc


async def import_public_key(encoded: str) -> PublicKeyHandle:
    der = _decode_key_text(encoded)
    try:
        key = await asyncio.to_thread(serialization.load_der_public_key, der)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyImportError("bytes are not a valid SPKI public key") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyImportError(f"SPKI does not contain an RSA key ({type(key).__name__})")
    handle = PublicKeyHandle(key)
    # the loader also takes PKCS#1; only canonical SPKI is accepted
    if handle.export_der() != der:
        raise KeyImportError("public key is not SPKI encoded")
    return handle


async def import_private_key(encoded: str) -> PrivateKeyHandle:
    der = _decode_key_text(encoded)
    try:
        key = await asyncio.to_thread(serialization.load_der_private_key, der, None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyImportError("bytes are not a valid PKCS8 private key") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyImportError(f"PKCS8 does not contain an RSA key ({type(key).__name__})")
    handle = PrivateKeyHandle(key)
    if handle.export_der() != der:
        raise KeyImportError("private key is not PKCS8 encoded")
    return handle


# --------- Cipher ----------
async def encrypt(public_key: Union[str, PublicKeyHandle], message: str) -> bytes:
    """
    Encrypt a UTF-8 message with RSA-OAEP.

    `public_key` is normally the Base64 SPKI text handed out by the key store;
    an already imported PublicKeyHandle is accepted as well. Messages longer
    than the OAEP bound (190 bytes for 2048-bit keys) raise
    MessageTooLargeError before any cryptographic work.
    """
    handle = public_key if isinstance(public_key, PublicKeyHandle) else await import_public_key(public_key)
    data = message.encode("utf-8")
    ct = await asyncio.to_thread(handle.encrypt, data)
    log.debug(f"[ENCRYPT] plaintext={len(data)}B ciphertext={len(ct)}B")
    return ct


async def decrypt(private_key: PrivateKeyHandle, ciphertext: bytes) -> str:
    if not isinstance(private_key, PrivateKeyHandle):
        raise TypeError(f"decrypt needs a PrivateKeyHandle, got {type(private_key).__name__}")
    pt = await asyncio.to_thread(private_key.decrypt, ciphertext)
    try:
        return pt.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecryptionError("decrypted bytes are not valid UTF-8") from exc


def encode_ciphertext(ciphertext: bytes) -> str:
    return b64e(ciphertext)


def decode_ciphertext(text: str) -> bytes:
    return b64d(text)

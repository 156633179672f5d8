"""
Koder Core Package
==================
Client-side public-key helpers used by the koder scanner.

Provides:
- RSA-OAEP key generation, Base64 key codec and message encrypt/decrypt
- Time-bounded persistence of the active key pair (1 hour TTL)
- Pluggable key-value storage (SQLite default, in-memory for tests)
- The decoder collaborator contract for the barcode engines
"""

from .crypto import (
    KeyPair, PublicKeyHandle, PrivateKeyHandle,
    generate_key_pair, export_public_key, export_private_key,
    import_public_key, import_private_key,
    encrypt, decrypt, encode_ciphertext, decode_ciphertext,
)
from .keystore import KeyStore, persist_key_pair, load_persisted_key_pair

__all__ = [
    "KeyPair",
    "PublicKeyHandle",
    "PrivateKeyHandle",
    "generate_key_pair",
    "export_public_key",
    "export_private_key",
    "import_public_key",
    "import_private_key",
    "encrypt",
    "decrypt",
    "encode_ciphertext",
    "decode_ciphertext",
    "KeyStore",
    "persist_key_pair",
    "load_persisted_key_pair",
]

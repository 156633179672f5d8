"""
koder_core.keystore
-------------------
Time-bounded persistence of the active key pair.

A save exports both keys and writes three fields (`privateKeyBase64`,
`publicKeyBase64`, `ttl`) into the configured StorageProvider, with
`ttl = now + 1h` in epoch milliseconds. A load checks the fields in that
order and hands back the imported private key together with the public key
still in its Base64 form; callers import the public key only when they
encrypt.

Saving is best effort: failures are logged and reported in the returned
SaveResult, never raised, so a freshly generated pair stays usable even
when the cache write fails.
"""

from __future__ import annotations
from typing import Callable, Optional

from .constants import FIELD_TTL, KEY_TTL_MS
from .crypto import KeyPair, export_private_key, export_public_key, import_private_key
from .errors import NotFoundError, ExpiredError
from .logger import get_logger
from .storage import StorageProvider, StoredKeyRecord, SaveResult, LoadedKeys, load_storage_provider
from .utils import now_ms

log = get_logger("koder.KeyStore")


class KeyStore:
    def __init__(self, storage: StorageProvider, clock: Callable[[], int] = now_ms):
        self.storage = storage
        self.clock = clock

    async def save(self, pair: KeyPair) -> SaveResult:
        try:
            private_b64 = await export_private_key(pair.private_key)
            public_b64 = await export_public_key(pair.public_key)
            record = StoredKeyRecord(
                private_key_b64=private_b64,
                public_key_b64=public_b64,
                expires_at_ms=self.clock() + KEY_TTL_MS,
            )
            # invalidate the old record first; the real ttl is written last
            self.storage.set(FIELD_TTL, "0")
            for field, value in record.to_fields().items():
                self.storage.set(field, value)
            self.storage.flush()
        except Exception as exc:
            log.exception(f"[KEYSTORE] save abandoned: {exc}")
            return SaveResult(ok=False, error=exc)

        log.info(f"[KEYSTORE] saved key pair expires_at={record.expires_at_ms}")
        return SaveResult(ok=True, expires_at_ms=record.expires_at_ms)

    async def load(self) -> LoadedKeys:
        record = StoredKeyRecord.from_storage(self.storage)
        if record.private_key_b64 is None:
            raise NotFoundError("private key not found")
        if record.public_key_b64 is None:
            raise NotFoundError("public key not found")
        if not record.is_valid_at(self.clock()):
            log.info(f"[KEYSTORE] stored keys expired at {record.expires_at_ms}")
            raise ExpiredError("keys expired")

        private_key = await import_private_key(record.private_key_b64)
        return LoadedKeys(private_key=private_key, public_key_b64=record.public_key_b64)


_default_storage: Optional[StorageProvider] = None


def default_storage() -> StorageProvider:
    """Process-wide provider, resolved from the environment on first use."""
    global _default_storage
    if _default_storage is None:
        _default_storage = load_storage_provider()
    return _default_storage


async def persist_key_pair(pair: KeyPair, storage: Optional[StorageProvider] = None) -> SaveResult:
    return await KeyStore(storage if storage is not None else default_storage()).save(pair)


async def load_persisted_key_pair(storage: Optional[StorageProvider] = None) -> LoadedKeys:
    return await KeyStore(storage if storage is not None else default_storage()).load()

# koder_core/storage/models.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

from koder_core.constants import FIELD_PRIVATE_KEY, FIELD_PUBLIC_KEY, FIELD_TTL

if TYPE_CHECKING:
    from koder_core.crypto import PrivateKeyHandle
    from koder_core.storage.provider import StorageProvider


@dataclass
class StoredKeyRecord:
    """
    Persisted form of the active key pair.

    Written and read as three independent fields; `expires_at_ms` is
    stored as a decimal string under `ttl`.
    """
    private_key_b64: Optional[str]
    public_key_b64: Optional[str]
    expires_at_ms: Optional[int] = None

    def to_fields(self) -> Dict[str, str]:
        return {
            FIELD_PRIVATE_KEY: self.private_key_b64,
            FIELD_PUBLIC_KEY: self.public_key_b64,
            FIELD_TTL: str(self.expires_at_ms),
        }

    @classmethod
    def from_storage(cls, storage: "StorageProvider") -> "StoredKeyRecord":
        raw_ttl = storage.get(FIELD_TTL)
        try:
            expires = int(raw_ttl) if raw_ttl is not None else None
        except ValueError:
            expires = None
        return cls(
            private_key_b64=storage.get(FIELD_PRIVATE_KEY),
            public_key_b64=storage.get(FIELD_PUBLIC_KEY),
            expires_at_ms=expires,
        )

    def is_valid_at(self, now_ms: int) -> bool:
        # strict: a record at its expiry instant is already expired
        return self.expires_at_ms is not None and now_ms < self.expires_at_ms


@dataclass
class SaveResult:
    """Outcome of a best-effort save; callers are free to ignore it."""
    ok: bool
    expires_at_ms: Optional[int] = None
    error: Optional[BaseException] = None


@dataclass
class LoadedKeys:
    private_key: "PrivateKeyHandle"
    public_key_b64: str

# koder_core/storage/provider.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional


class StorageProvider(ABC):
    """
    String-keyed, string-valued store backing the key store.

    Providers are process-wide shared state with no transactions; callers
    assume a single writer.
    """

    @abstractmethod
    def get(self, field: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, field: str, value: str) -> None:
        ...

    def flush(self) -> None:
        return

    def close(self) -> None:
        return

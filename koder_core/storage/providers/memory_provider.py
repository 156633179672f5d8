from typing import Dict, Optional
from koder_core.storage.provider import StorageProvider


class InMemoryStorage(StorageProvider):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.fields: Dict[str, str] = dict(initial or {})

    def get(self, field: str) -> Optional[str]:
        return self.fields.get(field)

    def set(self, field: str, value: str) -> None:
        self.fields[field] = value

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from koder_core.constants import DEFAULT_WASM_DIRECTORY
from koder_core.errors import KoderError

RGBA_CHANNELS = 4


class DecoderError(KoderError):
    pass


@dataclass(frozen=True)
class DecodeResult:
    code: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "type": self.type}


class BaseDecoder:
    """
    Contract for the native barcode engines.

    Engines are opaque: `initialize` loads the engine from `wasm_directory`
    and `decode` runs a single scan over an RGBA frame, returning the first
    symbol found or None.
    """
    name: str = "base"

    def __init__(self):
        self.wasm_directory: Optional[str] = None

    async def initialize(self, config: Optional[Dict[str, Any]] = None) -> "BaseDecoder":
        config = config or {}
        self.wasm_directory = (
            config.get("wasm_directory") or config.get("wasmDirectory") or DEFAULT_WASM_DIRECTORY
        )
        await self._load_engine(self.wasm_directory)
        return self

    async def _load_engine(self, directory: str) -> None:
        raise NotImplementedError

    def decode(self, image: bytes, width: int, height: int, **options: Any) -> Optional[DecodeResult]:
        raise NotImplementedError

    @property
    def ready(self) -> bool:
        return self.wasm_directory is not None

    def healthz(self) -> dict:
        return {"status": "ok" if self.ready else "uninitialized", "decoder": self.name}

    @staticmethod
    def check_frame(image: bytes, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise DecoderError(f"invalid frame size {width}x{height}")
        needed = width * height * RGBA_CHANNELS
        if len(image) < needed:
            raise DecoderError(f"frame holds {len(image)} bytes, {width}x{height} RGBA needs {needed}")

# koder_core/decoders/__init__.py
from koder_core.decoders.decoder_base import BaseDecoder, DecodeResult, DecoderError

__all__ = ["BaseDecoder", "DecodeResult", "DecoderError"]

from __future__ import annotations


class KoderError(Exception):
    pass


class CodecError(KoderError, ValueError):
    """Text is not Latin-1, or not valid Base64."""


class KeyGenerationError(KoderError):
    pass


class KeyImportError(KoderError):
    """Key bytes are not a structurally valid RSA key of the expected kind."""


class KeyExportError(KoderError):
    pass


class NotFoundError(KoderError):
    pass


class ExpiredError(KoderError):
    pass


class MessageTooLargeError(KoderError):
    pass


class DecryptionError(KoderError):
    """Ciphertext does not match the key, is corrupted, or is not UTF-8."""

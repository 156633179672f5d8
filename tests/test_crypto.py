import asyncio

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from koder_core import crypto
from koder_core.crypto import (
    PublicKeyHandle, PrivateKeyHandle, max_plaintext_size,
    generate_key_pair, export_public_key, export_private_key,
    import_public_key, import_private_key,
    encrypt, decrypt, encode_ciphertext, decode_ciphertext,
)
from koder_core.errors import (
    CodecError, KeyGenerationError, KeyImportError, KeyExportError,
    MessageTooLargeError, DecryptionError,
)
from koder_core.utils import bytes_to_text, text_to_bytes, b64e, b64d


@pytest.fixture(scope="module")
def pair():
    return asyncio.run(generate_key_pair())


@pytest.fixture(scope="module")
def exported(pair):
    async def _export():
        return await export_public_key(pair.public_key), await export_private_key(pair.private_key)
    return asyncio.run(_export())


def test_codec_roundtrip_all_byte_values():
    raw = bytes(range(256))
    text = bytes_to_text(raw)
    assert len(text) == 256
    assert [ord(c) for c in text] == list(range(256))
    assert text_to_bytes(text) == raw


def test_codec_rejects_code_points_above_255():
    with pytest.raises(CodecError):
        text_to_bytes("price: €5")


def test_b64_rejects_garbage():
    assert b64d(b64e(b"\x00\xff koder")) == b"\x00\xff koder"
    with pytest.raises(CodecError):
        b64d("not*base64")


def test_generated_pair_parameters(pair):
    assert pair.public_key.key_size == 2048
    assert pair.private_key.key_size == 2048
    assert pair.public_key.max_plaintext_size == 190
    assert max_plaintext_size(4096) == 446


def test_export_import_roundtrip(pair, exported):
    pub_b64, priv_b64 = exported

    async def _run():
        pub = await import_public_key(pub_b64)
        priv = await import_private_key(priv_b64)
        ct = await encrypt(pub, "round trip é世")
        return pub, await decrypt(priv, ct)

    pub, msg = asyncio.run(_run())
    assert msg == "round trip é世"
    assert pub.fingerprint() == pair.public_key.fingerprint()


def test_exports_are_spki_and_pkcs8(exported):
    pub_b64, priv_b64 = exported
    # both load with the plain DER loaders
    assert serialization.load_der_public_key(b64d(pub_b64)).key_size == 2048
    assert serialization.load_der_private_key(b64d(priv_b64), None).key_size == 2048


def test_encrypt_accepts_encoded_public_key(pair, exported):
    pub_b64, _ = exported

    async def _run():
        ct = await encrypt(pub_b64, "hello world")
        return ct, await decrypt(pair.private_key, ct)

    ct, msg = asyncio.run(_run())
    assert len(ct) == 256
    assert msg == "hello world"


def test_encryption_is_randomized(pair):
    async def _run():
        return await encrypt(pair.public_key, "same"), await encrypt(pair.public_key, "same")

    c1, c2 = asyncio.run(_run())
    assert c1 != c2


def test_size_bound(pair):
    ok = "a" * 190
    ct = asyncio.run(encrypt(pair.public_key, ok))
    assert asyncio.run(decrypt(pair.private_key, ct)) == ok

    with pytest.raises(MessageTooLargeError):
        asyncio.run(encrypt(pair.public_key, "a" * 191))

    # the bound is on UTF-8 bytes, not characters
    assert len(("é" * 95).encode("utf-8")) == 190
    asyncio.run(encrypt(pair.public_key, "é" * 95))
    with pytest.raises(MessageTooLargeError):
        asyncio.run(encrypt(pair.public_key, "é" * 95 + "a"))


def test_tampered_ciphertext_fails(pair):
    ct = bytearray(asyncio.run(encrypt(pair.public_key, "do not touch")))
    ct[100] ^= 0x01
    with pytest.raises(DecryptionError):
        asyncio.run(decrypt(pair.private_key, bytes(ct)))


def test_truncated_ciphertext_fails(pair):
    ct = asyncio.run(encrypt(pair.public_key, "short"))
    with pytest.raises(DecryptionError):
        asyncio.run(decrypt(pair.private_key, ct[:-1]))


def test_wrong_private_key_fails(pair):
    other = asyncio.run(generate_key_pair())
    ct = asyncio.run(encrypt(pair.public_key, "for pair only"))
    with pytest.raises(DecryptionError):
        asyncio.run(decrypt(other.private_key, ct))


def test_non_utf8_plaintext_is_decryption_error(pair):
    ct = pair.public_key.encrypt(b"\xff\xfe\xfd")
    with pytest.raises(DecryptionError):
        asyncio.run(decrypt(pair.private_key, ct))


def test_ciphertext_transport_encoding(pair):
    ct = asyncio.run(encrypt(pair.public_key, "over json"))
    text = encode_ciphertext(ct)
    assert text.isascii()
    assert decode_ciphertext(text) == ct
    assert asyncio.run(decrypt(pair.private_key, decode_ciphertext(text))) == "over json"


def test_handles_are_capability_restricted(pair):
    with pytest.raises(TypeError):
        PublicKeyHandle(pair.private_key._key)
    with pytest.raises(TypeError):
        PrivateKeyHandle(pair.public_key._key)
    assert not hasattr(pair.public_key, "decrypt")
    assert not hasattr(pair.private_key, "encrypt")
    with pytest.raises(TypeError):
        asyncio.run(decrypt(pair.public_key, b"\x00" * 256))


def test_private_handle_repr_hides_key(pair):
    assert repr(pair.private_key) == "PrivateKeyHandle(key_size=2048)"


def test_import_rejects_malformed_material(exported):
    pub_b64, priv_b64 = exported
    with pytest.raises(KeyImportError):
        asyncio.run(import_public_key("%%%"))
    with pytest.raises(KeyImportError):
        asyncio.run(import_public_key(b64e(b"not a key at all")))
    # key kinds are not interchangeable
    with pytest.raises(KeyImportError):
        asyncio.run(import_public_key(priv_b64))
    with pytest.raises(KeyImportError):
        asyncio.run(import_private_key(pub_b64))


def test_import_rejects_other_algorithms():
    ec_key = ec.generate_private_key(ec.SECP256R1())
    spki = ec_key.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    pkcs8 = ec_key.private_bytes(
        serialization.Encoding.DER, serialization.PrivateFormat.PKCS8, serialization.NoEncryption()
    )
    with pytest.raises(KeyImportError):
        asyncio.run(import_public_key(b64e(spki)))
    with pytest.raises(KeyImportError):
        asyncio.run(import_private_key(b64e(pkcs8)))


def test_export_rejects_wrong_handle(pair):
    with pytest.raises(KeyExportError):
        asyncio.run(export_public_key(pair.private_key))
    with pytest.raises(KeyExportError):
        asyncio.run(export_private_key(pair.public_key))


def test_generation_failure_is_wrapped(monkeypatch):
    def boom():
        raise ValueError("provider rejected parameters")

    monkeypatch.setattr(crypto, "_generate_rsa", boom)
    with pytest.raises(KeyGenerationError):
        asyncio.run(generate_key_pair())


def test_import_rejects_pkcs1_encodings(pair):
    pkcs1_pub = pair.public_key._key.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.PKCS1
    )
    traditional_priv = pair.private_key._key.private_bytes(
        serialization.Encoding.DER,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )
    with pytest.raises(KeyImportError):
        asyncio.run(import_public_key(b64e(pkcs1_pub)))
    with pytest.raises(KeyImportError):
        asyncio.run(import_private_key(b64e(traditional_priv)))

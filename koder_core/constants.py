"""
koder_core.constants
--------------------
Fixed algorithm parameters and persisted field names.
"""

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
HASH_SIZE = 32  # SHA-256 digest length in bytes

# OAEP overhead: 2 * hLen + 2
OAEP_OVERHEAD = 2 * HASH_SIZE + 2

KEY_TTL_MS = 3600 * 1000  # 1 hour

FIELD_PRIVATE_KEY = "privateKeyBase64"
FIELD_PUBLIC_KEY = "publicKeyBase64"
FIELD_TTL = "ttl"

DEFAULT_DB_PATH = "db/koder_keys.db"
DEFAULT_WASM_DIRECTORY = "./wasm"

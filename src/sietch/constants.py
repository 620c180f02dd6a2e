"""Fixed vault layout and provisioning defaults shared across the pipeline."""

from __future__ import annotations

VAULT_META_DIR = ".sietch"
KEYS_DIR = f"{VAULT_META_DIR}/keys"
SECRET_KEY_FILE = f"{KEYS_DIR}/secret.key"
SYNC_DIR = f"{VAULT_META_DIR}/sync"
SYNC_PRIVATE_KEY_FILE = f"{SYNC_DIR}/sync_private.pem"
SYNC_PUBLIC_KEY_FILE = f"{SYNC_DIR}/sync_public.pem"
MANIFEST_FILE = "vault.yaml"

# Written by every scaffold run; backed up before a forced re-scaffold.
GENERATED_VAULT_FILES = (
    SECRET_KEY_FILE,
    SYNC_PRIVATE_KEY_FILE,
    SYNC_PUBLIC_KEY_FILE,
    MANIFEST_FILE,
)

# Created for every vault, independent of the template.
BASE_VAULT_DIRECTORIES = (
    KEYS_DIR,
    f"{VAULT_META_DIR}/manifests",
    f"{VAULT_META_DIR}/chunks",
    SYNC_DIR,
    "data",
)

AES_KEY_BYTES = 32
KDF_SALT_BYTES = 16
AES_NONCE_BYTES = 12

DEFAULT_SCRYPT_N = 32768
DEFAULT_SCRYPT_R = 8
DEFAULT_SCRYPT_P = 1
DEFAULT_PBKDF2_ITERS = 600_000
DEFAULT_RSA_KEY_SIZE = 4096

DEFAULT_FILE_MODE = 0o644
SECRET_FILE_MODE = 0o600

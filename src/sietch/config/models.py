"""Vault configuration models -- the content of the vault manifest."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from sietch.templates.models import _normalize_string_list, _StrictModel


class KeyType(str, Enum):
    AES = "aes"
    CHACHA20 = "chacha20"


class AESMode(str, Enum):
    GCM = "gcm"
    CBC = "cbc"


class AESConfig(_StrictModel):
    """Symmetric key parameters.

    ``key`` holds the secret only for the lifetime of the provisioning call
    and is never serialized; the manifest records how the key was derived
    and a fingerprint to check it against.
    """

    key: str = Field(default="", exclude=True, repr=False)
    mode: AESMode = AESMode.GCM
    kdf: str = "scrypt"
    salt: str = ""
    scrypt_n: int | None = None
    scrypt_r: int | None = None
    scrypt_p: int | None = None
    pbkdf2_iterations: int | None = None
    key_hash: str = ""


class KeyConfig(_StrictModel):
    key_type: KeyType = KeyType.AES
    key_path: str = ""
    aes: AESConfig | None = None


class TrustedPeer(_StrictModel):
    id: str
    name: str = ""
    public_key: str = ""
    fingerprint: str = ""
    trusted_since: datetime | None = None


class RSAConfig(_StrictModel):
    key_size: int
    public_key_path: str = ""
    private_key_path: str = ""
    fingerprint: str = ""
    trusted_peers: list[TrustedPeer] = Field(default_factory=list)


class EncryptionConfig(_StrictModel):
    type: KeyType
    key_path: str
    passphrase_protected: bool = False
    aes: AESConfig | None = None


class ChunkingConfig(_StrictModel):
    strategy: str
    chunk_size: str
    hash_algorithm: str


class DedupConfig(_StrictModel):
    enabled: bool
    strategy: str
    min_size: str
    max_size: str
    gc_threshold: int
    index_enabled: bool
    cross_file: bool


class SyncConfig(_StrictModel):
    mode: str
    rsa: RSAConfig | None = None


class VaultIdentity(_StrictModel):
    """Who the vault is.  ``id`` is generated once per scaffold call."""

    id: str
    name: str
    author: str = ""
    created_at: datetime

    @field_validator("id", "name", "author")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return value.strip()


class VaultMetadata(_StrictModel):
    author: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, values: list[str]) -> list[str]:
        return _normalize_string_list(values)


class VaultConfiguration(_StrictModel):
    """The single durable record describing a vault."""

    vault_id: str
    name: str
    created_at: datetime
    metadata: VaultMetadata = Field(default_factory=VaultMetadata)
    encryption: EncryptionConfig
    chunking: ChunkingConfig
    compression: str
    deduplication: DedupConfig
    sync: SyncConfig

    def missing_fields(self) -> list[str]:
        """Names of fields downstream vault operations need but are unset."""
        missing: list[str] = []
        for name in ("vault_id", "name", "compression"):
            if not getattr(self, name):
                missing.append(name)
        if not self.encryption.key_path:
            missing.append("encryption.key_path")
        if self.encryption.type == KeyType.AES and self.encryption.aes is None:
            missing.append("encryption.aes")
        for name in ("strategy", "chunk_size", "hash_algorithm"):
            if not getattr(self.chunking, name):
                missing.append(f"chunking.{name}")
        if self.deduplication.enabled:
            for name in ("strategy", "min_size", "max_size"):
                if not getattr(self.deduplication, name):
                    missing.append(f"deduplication.{name}")
        if not self.sync.mode:
            missing.append("sync.mode")
        rsa = self.sync.rsa
        if rsa is None:
            missing.append("sync.rsa")
        else:
            for name in ("public_key_path", "private_key_path", "fingerprint"):
                if not getattr(rsa, name):
                    missing.append(f"sync.rsa.{name}")
        return missing

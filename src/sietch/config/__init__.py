"""Vault configuration models and the pure configuration assembler."""

from sietch.config.builder import (
    build_from_template,
    build_vault_config,
    chunking_from_defaults,
    dedup_from_defaults,
)
from sietch.config.models import (
    AESConfig,
    AESMode,
    ChunkingConfig,
    DedupConfig,
    EncryptionConfig,
    KeyConfig,
    KeyType,
    RSAConfig,
    SyncConfig,
    TrustedPeer,
    VaultConfiguration,
    VaultIdentity,
    VaultMetadata,
)

__all__ = [
    "AESConfig",
    "AESMode",
    "ChunkingConfig",
    "DedupConfig",
    "EncryptionConfig",
    "KeyConfig",
    "KeyType",
    "RSAConfig",
    "SyncConfig",
    "TrustedPeer",
    "VaultConfiguration",
    "VaultIdentity",
    "VaultMetadata",
    "build_from_template",
    "build_vault_config",
    "chunking_from_defaults",
    "dedup_from_defaults",
]

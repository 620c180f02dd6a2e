"""Assemble a ``VaultConfiguration`` from identity, template defaults and keys.

Everything here is pure: no I/O, no randomness.  The only value that differs
between two otherwise identical scaffolds is the identity passed in.
"""

from __future__ import annotations

from sietch.config.models import (
    ChunkingConfig,
    DedupConfig,
    EncryptionConfig,
    KeyConfig,
    KeyType,
    RSAConfig,
    SyncConfig,
    VaultConfiguration,
    VaultIdentity,
    VaultMetadata,
)
from sietch.templates.models import VaultDefaults


def chunking_from_defaults(defaults: VaultDefaults) -> ChunkingConfig:
    return ChunkingConfig(
        strategy=defaults.chunking_strategy,
        chunk_size=defaults.chunk_size,
        hash_algorithm=defaults.hash_algorithm,
    )


def dedup_from_defaults(defaults: VaultDefaults) -> DedupConfig:
    return DedupConfig(
        enabled=defaults.enable_dedup,
        strategy=defaults.dedup_strategy,
        min_size=defaults.dedup_min_size,
        max_size=defaults.dedup_max_size,
        gc_threshold=defaults.dedup_gc_threshold,
        index_enabled=defaults.dedup_index_enabled,
        cross_file=defaults.dedup_cross_file,
    )


def build_vault_config(
    identity: VaultIdentity,
    *,
    encryption_type: KeyType,
    key_path: str,
    use_passphrase: bool,
    chunking: ChunkingConfig,
    compression: str,
    sync_mode: str,
    tags: list[str],
    key_config: KeyConfig | None,
    dedup: DedupConfig,
    rsa: RSAConfig | None = None,
) -> VaultConfiguration:
    """Merge all inputs into one configuration value.

    Inputs are copied, so later mutation of the result (the RSA step fills in
    key paths) never leaks back into the caller's objects.  The secret key held
    by ``key_config`` is stripped; only its derivation parameters are kept.
    """
    aes = None
    if key_config is not None and key_config.aes is not None:
        aes = key_config.aes.model_copy(update={"key": ""})

    return VaultConfiguration(
        vault_id=identity.id,
        name=identity.name,
        created_at=identity.created_at,
        metadata=VaultMetadata(author=identity.author, tags=sorted(tags)),
        encryption=EncryptionConfig(
            type=encryption_type,
            key_path=key_path,
            passphrase_protected=use_passphrase,
            aes=aes,
        ),
        chunking=chunking.model_copy(),
        compression=compression,
        deduplication=dedup.model_copy(),
        sync=SyncConfig(
            mode=sync_mode,
            rsa=rsa.model_copy(deep=True) if rsa is not None else None,
        ),
    )


def build_from_template(
    identity: VaultIdentity,
    defaults: VaultDefaults,
    tags: list[str],
    *,
    key_path: str,
    key_config: KeyConfig | None,
    use_passphrase: bool = False,
    encryption_type: KeyType = KeyType.AES,
) -> VaultConfiguration:
    """Build a configuration carrying every field of a template's defaults."""
    rsa = None
    if defaults.rsa_key_size is not None:
        rsa = RSAConfig(key_size=defaults.rsa_key_size)
    return build_vault_config(
        identity,
        encryption_type=encryption_type,
        key_path=key_path,
        use_passphrase=use_passphrase,
        chunking=chunking_from_defaults(defaults),
        compression=defaults.compression,
        sync_mode=defaults.sync_mode,
        tags=tags,
        key_config=key_config,
        dedup=dedup_from_defaults(defaults),
        rsa=rsa,
    )

"""Key provisioning: the vault's symmetric key and its sync RSA keypair.

Primitives come from pyca/cryptography; this module only decides parameters
and where the material lands on disk.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from sietch import constants
from sietch.config.models import AESConfig, AESMode, KeyConfig, KeyType, VaultConfiguration
from sietch.errors import KeyGenerationError, ScaffoldError, SyncKeyGenerationError
from sietch.fs import ensure_directory, write_file
from sietch.settings import ScaffoldSettings

logger = logging.getLogger(__name__)

_WRAP_AAD = b"sietch-secret-key-v1"
_RSA_PUBLIC_EXPONENT = 65537


@dataclass(frozen=True)
class KeyGenParams:
    """How the symmetric key is produced.

    Attributes:
        key_type: Only ``KeyType.AES`` is provisioned.
        use_passphrase: Wrap the key under a passphrase-derived key.
        key_file: Import key material from this file instead of generating it.
        aes_mode: Cipher mode recorded for the vault's chunk encryption.
        use_scrypt: scrypt when True, PBKDF2-HMAC-SHA256 otherwise.
    """

    key_type: KeyType = KeyType.AES
    use_passphrase: bool = False
    key_file: str = ""
    aes_mode: AESMode = AESMode.GCM
    use_scrypt: bool = True
    scrypt_n: int = constants.DEFAULT_SCRYPT_N
    scrypt_r: int = constants.DEFAULT_SCRYPT_R
    scrypt_p: int = constants.DEFAULT_SCRYPT_P
    pbkdf2_iterations: int = constants.DEFAULT_PBKDF2_ITERS

    @classmethod
    def for_scaffold(cls, settings: ScaffoldSettings) -> KeyGenParams:
        """Fixed policy for scaffolded vaults: AES-GCM, scrypt, no passphrase."""
        return cls(
            key_type=KeyType.AES,
            use_passphrase=False,
            key_file="",
            aes_mode=AESMode.GCM,
            use_scrypt=True,
            scrypt_n=settings.scrypt_n,
            scrypt_r=settings.scrypt_r,
            scrypt_p=settings.scrypt_p,
            pbkdf2_iterations=settings.pbkdf2_iterations,
        )


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _derive(params: KeyGenParams, secret: bytes, salt: bytes) -> bytes:
    if params.use_scrypt:
        kdf = Scrypt(
            salt=salt,
            length=constants.AES_KEY_BYTES,
            n=params.scrypt_n,
            r=params.scrypt_r,
            p=params.scrypt_p,
        )
    else:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=constants.AES_KEY_BYTES,
            salt=salt,
            iterations=params.pbkdf2_iterations,
        )
    return kdf.derive(secret)


def _read_key_file(path: str) -> bytes:
    raw = Path(path).expanduser().read_bytes().strip()
    if len(raw) == constants.AES_KEY_BYTES:
        return raw
    try:
        decoded = base64.b64decode(raw, validate=True)
    except ValueError as exc:
        raise ValueError(f"key file {path} is neither raw nor base64 key material") from exc
    if len(decoded) != constants.AES_KEY_BYTES:
        raise ValueError(
            f"key file {path} holds {len(decoded)} bytes, expected {constants.AES_KEY_BYTES}"
        )
    return decoded


def public_key_fingerprint(public_key: rsa.RSAPublicKey) -> str:
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return "sha256:" + hashlib.sha256(der).hexdigest()


class KeyProvisioner:
    """Generates and persists key material inside a vault."""

    def __init__(self, passphrase: str | None = None) -> None:
        self._passphrase = passphrase

    def generate_symmetric_key(
        self, vault_path: str | Path, params: KeyGenParams
    ) -> KeyConfig:
        """Create the vault's secret key at ``.sietch/keys/secret.key``.

        The returned ``KeyConfig`` references the file; its in-memory key is
        excluded from serialization.  Raises KeyGenerationError.
        """
        key_path = Path(vault_path) / constants.SECRET_KEY_FILE
        try:
            return self._generate_symmetric_key(key_path, params)
        except KeyGenerationError:
            raise
        except (OSError, ValueError, TypeError, UnsupportedAlgorithm, ScaffoldError) as exc:
            raise KeyGenerationError(
                f"failed to generate encryption key at {key_path}: {exc}", path=key_path
            ) from exc

    def _generate_symmetric_key(self, key_path: Path, params: KeyGenParams) -> KeyConfig:
        if params.key_type != KeyType.AES:
            raise KeyGenerationError(
                f"unsupported key type {params.key_type.value!r}", path=key_path
            )

        salt = os.urandom(constants.KDF_SALT_BYTES)
        kdf_name = "scrypt" if params.use_scrypt else "pbkdf2"
        if params.key_file:
            key = _read_key_file(params.key_file)
            if not params.use_passphrase:
                kdf_name = "none"
            logger.info("Imported encryption key from %s", params.key_file)
        else:
            key = _derive(params, os.urandom(constants.AES_KEY_BYTES), salt)

        if params.use_passphrase:
            if not self._passphrase:
                raise KeyGenerationError(
                    "passphrase protection requested but no passphrase was supplied",
                    path=key_path,
                )
            wrapping_key = _derive(params, self._passphrase.encode("utf-8"), salt)
            nonce = os.urandom(constants.AES_NONCE_BYTES)
            sealed = AESGCM(wrapping_key).encrypt(nonce, key, _WRAP_AAD)
            stored = nonce + sealed
        else:
            stored = key

        ensure_directory(key_path.parent)
        write_file(key_path, (_b64(stored) + "\n").encode("ascii"), constants.SECRET_FILE_MODE)
        logger.info("Encryption key stored at: %s", key_path)

        aes = AESConfig(
            key=_b64(key),
            mode=params.aes_mode,
            kdf=kdf_name,
            salt=_b64(salt),
            key_hash=hashlib.sha256(key).hexdigest(),
        )
        if params.use_scrypt:
            aes.scrypt_n = params.scrypt_n
            aes.scrypt_r = params.scrypt_r
            aes.scrypt_p = params.scrypt_p
        else:
            aes.pbkdf2_iterations = params.pbkdf2_iterations
        return KeyConfig(key_type=params.key_type, key_path=str(key_path), aes=aes)

    def generate_rsa_keypair(
        self, vault_path: str | Path, configuration: VaultConfiguration
    ) -> None:
        """Create the sync keypair and record its paths on ``configuration.sync.rsa``.

        Raises SyncKeyGenerationError.
        """
        vault_path = Path(vault_path)
        rsa_config = configuration.sync.rsa
        if rsa_config is None:
            raise SyncKeyGenerationError(
                "sync RSA configuration must be initialized before key generation",
                path=vault_path,
            )

        private_path = vault_path / constants.SYNC_PRIVATE_KEY_FILE
        public_path = vault_path / constants.SYNC_PUBLIC_KEY_FILE
        try:
            private_key = rsa.generate_private_key(
                public_exponent=_RSA_PUBLIC_EXPONENT, key_size=rsa_config.key_size
            )
            private_pem = private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
            public_key = private_key.public_key()
            public_pem = public_key.public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
            ensure_directory(private_path.parent)
            write_file(private_path, private_pem, constants.SECRET_FILE_MODE)
            write_file(public_path, public_pem, constants.DEFAULT_FILE_MODE)
        except (OSError, ValueError, TypeError, UnsupportedAlgorithm, ScaffoldError) as exc:
            raise SyncKeyGenerationError(
                f"failed to generate RSA keys for sync in {private_path.parent}: {exc}",
                path=private_path.parent,
            ) from exc

        rsa_config.private_key_path = str(private_path)
        rsa_config.public_key_path = str(public_path)
        rsa_config.fingerprint = public_key_fingerprint(public_key)
        logger.info(
            "Generated %d-bit RSA sync keypair (%s)", rsa_config.key_size, rsa_config.fingerprint
        )

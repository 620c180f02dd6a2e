"""Runtime settings for vault scaffolding.

Only the config home is read from the environment (``SIETCH_CONFIG_HOME``,
then ``XDG_CONFIG_HOME``).  Key-derivation costs, the RSA size and the
fallback file mode are constructor arguments with production defaults::

    from sietch.settings import ScaffoldSettings
    settings = ScaffoldSettings.from_env()
    print(settings.templates_dir)   # ~/.config/sietch/templates
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from sietch import constants


def _default_config_home() -> Path:
    explicit = os.environ.get("SIETCH_CONFIG_HOME")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "sietch"
    return Path.home() / ".config" / "sietch"


@dataclass(frozen=True)
class ScaffoldSettings:
    """Configuration the scaffold pipeline reads instead of hardcoding.

    Attributes:
        config_home: Root of the per-user sietch configuration.  Templates
            are stored in ``<config_home>/templates``.
        scrypt_n: scrypt CPU/memory cost for symmetric key derivation.
        scrypt_r: scrypt block size.
        scrypt_p: scrypt parallelization.
        pbkdf2_iterations: Iteration count when PBKDF2 is selected instead
            of scrypt.
        rsa_key_size: Key size injected into the sync RSA block when a
            template does not declare one.
        default_file_mode: Permission bits applied to template files whose
            declared mode cannot be parsed.
    """

    config_home: Path
    scrypt_n: int = constants.DEFAULT_SCRYPT_N
    scrypt_r: int = constants.DEFAULT_SCRYPT_R
    scrypt_p: int = constants.DEFAULT_SCRYPT_P
    pbkdf2_iterations: int = constants.DEFAULT_PBKDF2_ITERS
    rsa_key_size: int = constants.DEFAULT_RSA_KEY_SIZE
    default_file_mode: int = constants.DEFAULT_FILE_MODE

    @property
    def templates_dir(self) -> Path:
        return self.config_home / "templates"

    @classmethod
    def from_env(cls) -> ScaffoldSettings:
        """Settings with the config home resolved from the environment."""
        return cls(config_home=_default_config_home())

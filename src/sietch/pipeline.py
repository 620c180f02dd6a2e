"""Scaffold pipeline -- turns a template into a ready-to-use vault.

Stages run strictly in order::

    init -> path_resolved -> skeleton_created -> keys_generated
         -> rsa_generated -> manifest_written

Any failure once the skeleton is being created moves the pipeline to
``rolled_back``: the partial vault is removed before the error propagates.
Template and path errors happen before anything is written and need no
cleanup.  Two scaffolds racing on the same path are not coordinated; the
last writer wins.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from sietch import constants
from sietch.config.builder import build_from_template
from sietch.config.models import RSAConfig, VaultConfiguration, VaultIdentity
from sietch.errors import ScaffoldError
from sietch.fs import materialize_template
from sietch.keys import KeyGenParams, KeyProvisioner
from sietch.manifest import ManifestWriter, YamlManifestWriter, manifest_path
from sietch.settings import ScaffoldSettings
from sietch.telemetry import NoOpTelemetrySink, TelemetryEvent, TelemetrySink
from sietch.templates.models import VaultTemplate
from sietch.templates.provider import TemplateProvider
from sietch.vault import RollbackController, prepare_vault_path

logger = logging.getLogger(__name__)


class ScaffoldStage(str, Enum):
    INIT = "init"
    PATH_RESOLVED = "path_resolved"
    SKELETON_CREATED = "skeleton_created"
    KEYS_GENERATED = "keys_generated"
    RSA_GENERATED = "rsa_generated"
    MANIFEST_WRITTEN = "manifest_written"
    ROLLED_BACK = "rolled_back"


@dataclass
class ScaffoldResult:
    """What a successful scaffold produced."""

    vault_path: Path
    template: VaultTemplate
    configuration: VaultConfiguration
    key_path: Path
    manifest_path: Path


def ensure_rsa_config(configuration: VaultConfiguration, key_size: int) -> RSAConfig:
    """Give ``configuration`` an empty sync RSA block if it has none."""
    if configuration.sync.rsa is None:
        configuration.sync.rsa = RSAConfig(key_size=key_size, trusted_peers=[])
    return configuration.sync.rsa


def _new_vault_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScaffoldPipeline:
    def __init__(
        self,
        provider: TemplateProvider,
        settings: ScaffoldSettings,
        *,
        key_provisioner: KeyProvisioner | None = None,
        manifest_writer: ManifestWriter | None = None,
        telemetry_sink: TelemetrySink | None = None,
        id_factory: Callable[[], str] = _new_vault_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.provider = provider
        self.settings = settings
        self.key_provisioner = key_provisioner or KeyProvisioner()
        self.manifest_writer = manifest_writer or YamlManifestWriter()
        self.telemetry = telemetry_sink or NoOpTelemetrySink()
        self._id_factory = id_factory
        self._clock = clock
        self.stage = ScaffoldStage.INIT

    def _advance(self, stage: ScaffoldStage, **attributes: object) -> None:
        self.stage = stage
        self.telemetry.emit(
            TelemetryEvent(name="scaffold.stage", attributes={"stage": stage.value, **attributes})
        )

    def run(
        self,
        template_name: str,
        vault_name: str = "",
        path: str = "",
        force: bool = False,
        *,
        author: str = "",
    ) -> ScaffoldResult:
        """Scaffold a vault from ``template_name``.

        ``vault_name`` defaults to the template name and ``path`` to the
        current directory.  Raises a ScaffoldError subclass on failure.
        """
        self._advance(ScaffoldStage.INIT, template=template_name)
        try:
            self.provider.initialize()
            template = self.provider.validate(template_name)
        except ScaffoldError as exc:
            self._report_failure(exc)
            raise

        logger.info("Loading template: %s", template.name)
        logger.info("Description: %s", template.description)

        name = vault_name or template.name
        try:
            vault_path = prepare_vault_path(path, name, force)
        except ScaffoldError as exc:
            self._report_failure(exc)
            raise
        self._advance(ScaffoldStage.PATH_RESOLVED, vault_path=str(vault_path))

        try:
            rollback = RollbackController(
                vault_path,
                [f.path for f in template.files] + list(constants.GENERATED_VAULT_FILES),
            )
        except ScaffoldError as exc:
            self._report_failure(exc)
            raise
        try:
            result = self._build(template, vault_path, name, author)
        except BaseException as exc:
            # Interrupts during key derivation must not leave a partial vault either.
            failed_at = self.stage
            cleaned = rollback.rollback()
            self._advance(ScaffoldStage.ROLLED_BACK, cleaned=cleaned)
            self._report_failure(exc, failed_at)
            raise
        rollback.discard()
        return result

    def _build(
        self, template: VaultTemplate, vault_path: Path, name: str, author: str
    ) -> ScaffoldResult:
        materialize_template(
            vault_path, template, default_mode=self.settings.default_file_mode
        )
        self._advance(ScaffoldStage.SKELETON_CREATED)

        key_config = self.key_provisioner.generate_symmetric_key(
            vault_path, KeyGenParams.for_scaffold(self.settings)
        )
        self._advance(ScaffoldStage.KEYS_GENERATED)

        identity = VaultIdentity(
            id=self._id_factory(),
            name=name,
            author=author,
            created_at=self._clock(),
        )
        configuration = build_from_template(
            identity,
            template.config,
            template.tags,
            key_path=key_config.key_path,
            key_config=key_config,
        )
        ensure_rsa_config(configuration, self.settings.rsa_key_size)

        self.key_provisioner.generate_rsa_keypair(vault_path, configuration)
        self._advance(ScaffoldStage.RSA_GENERATED)

        written = self.manifest_writer.write(vault_path, configuration)
        self._advance(ScaffoldStage.MANIFEST_WRITTEN)

        return ScaffoldResult(
            vault_path=vault_path,
            template=template,
            configuration=configuration,
            key_path=Path(key_config.key_path),
            manifest_path=Path(written) if written else manifest_path(vault_path),
        )

    def _report_failure(
        self, exc: BaseException, stage: ScaffoldStage | None = None
    ) -> None:
        stage = stage or self.stage
        self.telemetry.emit(
            TelemetryEvent(
                name="scaffold.failed",
                attributes={"stage": stage.value, "error": type(exc).__name__},
            )
        )


def scaffold(
    template_name: str,
    vault_name: str = "",
    path: str = "",
    force: bool = False,
    *,
    author: str = "",
    settings: ScaffoldSettings | None = None,
    telemetry_sink: TelemetrySink | None = None,
) -> ScaffoldResult:
    """Scaffold a vault using templates from the user's config directory."""
    settings = settings or ScaffoldSettings.from_env()
    provider = TemplateProvider(settings.templates_dir)
    pipeline = ScaffoldPipeline(provider, settings, telemetry_sink=telemetry_sink)
    return pipeline.run(template_name, vault_name, path, force, author=author)

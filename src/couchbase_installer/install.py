"""Installation pipeline for Couchbase Server."""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from couchbase_installer.checksum import parse_published_checksum, verify_checksum
from couchbase_installer.config import InstallerConfig
from couchbase_installer.download import CurlDownloader
from couchbase_installer.errors import ChecksumUnavailable, TransportError
from couchbase_installer.os_release import read_os_info
from couchbase_installer.platforms import Platform, detect_platform
from couchbase_installer.protocols import ArtifactDownloader, CommandExecutor, FileSystem
from couchbase_installer.staging import CompanionStager
from couchbase_installer.tuning import SystemTuner
from couchbase_installer.types import InstallRequest, OsInfo

logger = logging.getLogger(__name__)


class InstallStage(str, Enum):
    """Stages of one provisioning pass, in order."""

    PARSING_ARGS = "parsing arguments"
    VALIDATING = "validating"
    DISPATCHING = "dispatching"
    DOWNLOADING = "downloading"
    VERIFYING = "verifying"
    INSTALLING_PACKAGE = "installing package"
    TUNING = "tuning"
    STAGING = "staging"
    DONE = "done"


@dataclass(frozen=True)
class InstallPlan:
    """A resolved request bound to the platform that will carry it out.

    Attributes:
        request: Resolved install parameters.
        platform: Platform handling the host.
        artifact_name: Upstream package file name.
        artifact_url: Full download URL.
        checksum_url: URL of the published digest, when no digest is pinned.
    """

    request: InstallRequest
    platform: Platform
    artifact_name: str
    artifact_url: str
    checksum_url: str | None = None


class Installer:
    """Runs the provisioning pipeline.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Use factory method `create()` for production instantiation with defaults.

    The current stage is kept on `stage` so that a failure can be reported
    with the last stage reached. Nothing is retried or rolled back.
    """

    def __init__(
        self,
        config: InstallerConfig,
        runner: CommandExecutor,
        filesystem: FileSystem,
        downloader: ArtifactDownloader,
        tuner: SystemTuner,
        stager: CompanionStager,
    ) -> None:
        """Initialize installer with required dependencies.

        Args:
            config: Installer configuration.
            runner: Command runner for package and service commands.
            filesystem: Filesystem abstraction for system files.
            downloader: Artifact downloader.
            tuner: OS tuning actions.
            stager: Companion artifact staging.
        """
        self.config = config
        self.runner = runner
        self.fs = filesystem
        self.downloader = downloader
        self.tuner = tuner
        self.stager = stager
        self.stage = InstallStage.PARSING_ARGS

    @classmethod
    def create(
        cls,
        config: InstallerConfig,
        runner: CommandExecutor,
        filesystem: FileSystem,
        downloader: ArtifactDownloader | None = None,
    ) -> Installer:
        """Factory method for production instantiation.

        Args:
            config: Installer configuration.
            runner: Command runner.
            filesystem: Filesystem abstraction.
            downloader: Optional downloader (curl-based if not provided).

        Returns:
            Configured Installer instance.
        """
        return cls(
            config=config,
            runner=runner,
            filesystem=filesystem,
            downloader=downloader or CurlDownloader(runner),
            tuner=SystemTuner(config, filesystem, runner),
            stager=CompanionStager(config, filesystem),
        )

    def enter(self, stage: InstallStage) -> None:
        """Record a stage transition."""
        logger.debug("Stage: %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def read_os_info(self) -> OsInfo:
        """Read the host's OS identity."""
        return read_os_info(self.config.os_release_path)

    def plan(self, request: InstallRequest, os_info: OsInfo) -> InstallPlan:
        """Check prerequisites and pick the platform for the host.

        Args:
            request: Resolved install parameters.
            os_info: Host identity.

        Returns:
            InstallPlan for the detected platform.

        Raises:
            PrerequisiteMissing: If a required tool is absent.
            ConfigError: If a companion source is missing.
            UnsupportedPlatform: If no platform matches the host.
        """
        self.enter(InstallStage.DISPATCHING)
        for tool in self.config.required_tools:
            self.runner.require(tool)
        self.stager.check_sources()

        platform = detect_platform(os_info)
        logger.info("Detected %s", platform.display_name)
        artifact_url = platform.artifact_url(
            self.config.base_url, request.edition, request.version
        )
        checksum_url = None
        if request.checksum is None:
            checksum_url = f"{artifact_url}.{request.checksum_type.value}"
        return InstallPlan(
            request=request,
            platform=platform,
            artifact_name=platform.artifact_name(request.edition, request.version),
            artifact_url=artifact_url,
            checksum_url=checksum_url,
        )

    def execute(self, plan: InstallPlan) -> None:
        """Run every step of the plan in order.

        Args:
            plan: Plan returned by `plan()`.

        Raises:
            InstallerError: On the first failing step.
        """
        self.install_package(plan)

        self.enter(InstallStage.TUNING)
        self.tuner.update_swappiness(plan.request.swappiness)
        self.tuner.disable_transparent_huge_pages(plan.platform)

        self.enter(InstallStage.STAGING)
        self.stager.stage()

        self.enter(InstallStage.DONE)

    def install_package(self, plan: InstallPlan) -> None:
        """Install Couchbase Server without starting it.

        The artifact is verified before installation and removed afterwards
        whether or not installation succeeded.

        Args:
            plan: Plan returned by `plan()`.
        """
        request = plan.request
        plan.platform.install_dependencies(self.runner)

        download_dir = Path(tempfile.mkdtemp(prefix="couchbase-", dir=self.config.download_dir))
        artifact = download_dir / plan.artifact_name
        try:
            self.enter(InstallStage.DOWNLOADING)
            self.downloader.download(plan.artifact_url, artifact)

            self.enter(InstallStage.VERIFYING)
            expected = request.checksum or self._published_checksum(plan, download_dir)
            verify_checksum(artifact, expected, request.checksum_type)

            self.enter(InstallStage.INSTALLING_PACKAGE)
            plan.platform.install_package(self.runner, artifact)
            plan.platform.disable_autostart(self.runner, self.config.service_name)
        finally:
            self._remove_download_dir(download_dir)

    def _published_checksum(self, plan: InstallPlan, download_dir: Path) -> str:
        """Download and parse the digest published next to the artifact.

        Raises:
            ChecksumUnavailable: If the digest file cannot be fetched or holds
                no digest of the expected type.
        """
        url = plan.checksum_url or f"{plan.artifact_url}.{plan.request.checksum_type.value}"
        path = download_dir / f"{plan.artifact_name}.{plan.request.checksum_type.value}"
        try:
            self.downloader.download(url, path)
            content = path.read_text()
        except (TransportError, OSError) as e:
            raise ChecksumUnavailable(url, str(e)) from e

        digest = parse_published_checksum(content, plan.request.checksum_type)
        if digest is None:
            raise ChecksumUnavailable(url, f"no {plan.request.checksum_type.value} digest found")
        return digest

    def _remove_download_dir(self, path: Path) -> None:
        """Remove the download directory; failures are only logged."""
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.debug("Could not remove %s: %s", path, e)

from __future__ import annotations

import logging

from ..config import InstallConfig
from ..errors import DependencyError
from ..lib.command import CommandError
from ..lib.pkg import (
    apt_build_dep,
    apt_install,
    apt_purge,
    apt_update,
    enable_source_repositories,
    is_installed,
    missing_packages,
)

logger = logging.getLogger(__name__)


BASE_PACKAGES = ["lsb-release", "wget", "jq"]
BUILD_PACKAGES = ["git", "make", "cmake", "automake", "yasm", "g++", "pkg-config"]

DISTRO_PACKAGE = "imagemagick"


class InstallDependenciesStep:
    step_id = "20_install_dependencies"
    label = "Installing dependencies"

    def run(self, cfg: InstallConfig) -> InstallConfig:
        common = dict(env=cfg.env, log_file=cfg.log_path, dry_run=cfg.dry_run)

        try:
            # CI images come with a fresh index and no distro ImageMagick.
            if not cfg.ci:
                apt_update(**common)
                if is_installed(DISTRO_PACKAGE, dry_run=cfg.dry_run):
                    logger.info("Removing distro package %s", DISTRO_PACKAGE)
                    apt_purge(DISTRO_PACKAGE, **common)

            enable_source_repositories(
                sources_list=cfg.sources_list,
                sources_dir=cfg.sources_dir,
                dry_run=cfg.dry_run,
            )
            apt_build_dep(DISTRO_PACKAGE, **common)

            wanted = missing_packages(BASE_PACKAGES + BUILD_PACKAGES, dry_run=cfg.dry_run)
            skipped = sorted(set(BASE_PACKAGES + BUILD_PACKAGES) - set(wanted))
            if skipped:
                logger.info("Already installed: %s", ", ".join(skipped))
            apt_install(wanted, **common)
        except (CommandError, OSError, UnicodeDecodeError) as e:
            raise DependencyError(str(e)) from e

        return cfg

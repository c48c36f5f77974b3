from __future__ import annotations

import logging
from pathlib import Path

from ..config import InstallConfig
from ..errors import InstallerError, VerificationError
from ..lib.command import CommandError, run_cmd

logger = logging.getLogger(__name__)


PIN_CONTENTS = "Package: imagemagick*\nPin: release *\nPin-Priority: -1\n"


def write_pin_file(path: str, *, dry_run: bool = False) -> None:
    """Keep apt from installing the distro ImageMagick over the source build."""

    p = Path(path)
    if dry_run:
        logger.info("Would write %s", str(p))
        return
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(PIN_CONTENTS, encoding="utf-8")
    except OSError as e:
        raise InstallerError(f"Unable to write pin file {p}: {e}") from e
    logger.info("Wrote apt pin file %s", str(p))


def installed_version_text(cfg: InstallConfig) -> str:
    r = run_cmd(["identify", "-version"], env=cfg.env)
    return r.stdout


def verify_installation(cfg: InstallConfig) -> None:
    expected = cfg.imagemagick_version
    try:
        reported = installed_version_text(cfg)
    except (CommandError, OSError) as e:
        raise VerificationError(f"identify -version failed: {e}") from e

    if expected not in reported:
        first = reported.strip().splitlines()[0] if reported.strip() else "<no output>"
        raise VerificationError(f"Expected ImageMagick {expected}, identify reports: {first}")

    logger.info("Verified ImageMagick %s", expected)


class FinalizeStep:
    step_id = "90_finalize"
    label = "Performing final steps"
    verify_label = "Verifying ImageMagick installation"

    def run(self, cfg: InstallConfig) -> InstallConfig:
        write_pin_file(cfg.pin_file, dry_run=cfg.dry_run)

        if cfg.dry_run:
            logger.info("Dry run: skipping installation verification")
            return cfg

        verify_installation(cfg)
        return cfg

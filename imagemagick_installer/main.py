from __future__ import annotations

import argparse
import logging
import time
from typing import Callable, Optional

import httpx
from rich.console import Console

from . import __version__
from .config import build_install_config, load_file_config
from .console import StatusReporter
from .errors import InstallerError
from .lib.env import INSTALLER_UPDATE_URL
from .lib.host import detect_host
from .lib.releases import build_client, published_installer_version
from .logging_utils import close_logging, configure_logging
from .pipeline import PipelineResult, run_pipeline
from .preflight import check_preconditions
from .steps import (
    BuildAomStep,
    BuildImageMagickStep,
    BuildLibheifStep,
    FinalizeStep,
    InstallDependenciesStep,
    ResolveVersionsStep,
)
from .version import Version
from .workspace import workspace

logger = logging.getLogger(__name__)


def build_steps(client: httpx.Client):
    return [
        ResolveVersionsStep(client),
        InstallDependenciesStep(),
        BuildAomStep(),
        BuildLibheifStep(),
        BuildImageMagickStep(),
        FinalizeStep(),
    ]


def newer_installer_version(client: httpx.Client, url: str = INSTALLER_UPDATE_URL) -> Optional[str]:
    published = published_installer_version(client, url)
    if not published:
        return None
    try:
        if Version.parse(__version__) < Version.parse(published):
            return published
    except ValueError:
        logger.info("Unparseable published installer version: %r", published)
    return None


def run(
    *,
    imagemagick_version: Optional[str] = None,
    aom_version: Optional[str] = None,
    libheif_version: Optional[str] = None,
    ci: bool = False,
    dry_run: bool = False,
    config_path: Optional[str] = None,
    log_path: Optional[str] = None,
    work_dir: Optional[str] = None,
    console: Optional[Console] = None,
    client: Optional[httpx.Client] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run the installer and return the process exit code."""

    reporter = StatusReporter(console)

    try:
        check_preconditions(dry_run=dry_run)
        cfg = build_install_config(
            file_cfg=load_file_config(config_path),
            imagemagick_version=imagemagick_version,
            aom_version=aom_version,
            libheif_version=libheif_version,
            ci=ci,
            dry_run=dry_run,
            work_dir=work_dir,
            log_path=log_path,
        )
    except (InstallerError, OSError, ValueError, RuntimeError) as e:
        reporter.error(f"Error: {e}")
        return 1

    try:
        configure_logging(log_path=cfg.log_path)
    except OSError as e:
        reporter.error(f"Error: unable to open log file {cfg.log_path}: {e}")
        return 1
    logger.info("Installer %s starting (ci=%s dry_run=%s)", __version__, cfg.ci, cfg.dry_run)

    own_client = client is None
    http = client or build_client()
    result: Optional[PipelineResult] = None
    try:
        with workspace(cfg.work_dir, keep=cfg.ci):
            reporter.banner(__version__, newer_installer_version(http))
            reporter.host_summary(detect_host(cfg.cores))
            reporter.section("Installation Process")
            sleep(cfg.start_delay)

            result = run_pipeline(cfg=cfg, steps=build_steps(http), listener=reporter)
    except InstallerError as e:
        logger.error("%s", e)
        reporter.error(f"Error: {e}")
        reporter.log_pointer(cfg.log_path)
        return 1
    except Exception:
        logger.exception("Installer failed")
        raise
    finally:
        if own_client:
            http.close()
        close_logging()

    reporter.summary(result)
    return 0 if result.ok else 1


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="imagemagick-installer", allow_abbrev=False)
    p.add_argument("--imagemagick-version", default=None, help="Build this ImageMagick version instead of the latest")
    p.add_argument("--aom-version", default=None, help="Build this aom version instead of the latest")
    p.add_argument("--libheif-version", default=None, help="Build this libheif version instead of the latest")
    p.add_argument(
        "--travis",
        "--ci",
        dest="ci",
        action="store_true",
        help="CI mode: no package index refresh, keep the work directory",
    )
    p.add_argument("--config", default=None, help="Optional YAML config file")
    p.add_argument("--log", default=None, help="Path to installer log")
    p.add_argument("--work-dir", default=None, help="Directory for downloaded and extracted sources")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")

    args, unknown = p.parse_known_args(argv)
    if unknown:
        logger.debug("Ignoring unrecognized arguments: %s", unknown)

    return run(
        imagemagick_version=args.imagemagick_version,
        aom_version=args.aom_version,
        libheif_version=args.libheif_version,
        ci=bool(args.ci),
        dry_run=bool(args.dry_run),
        config_path=args.config,
        log_path=args.log,
        work_dir=args.work_dir,
    )


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from ..config import InstallConfig
from ..errors import BuildError
from .command import CommandError, run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourcePackage:
    """How one upstream tarball is fetched and built.

    Templates are formatted with ``version``.
    """

    name: str
    config_key: str
    url_template: str
    archive_template: str
    source_dir_template: str
    build_system: str  # cmake|autotools
    configure_flags: Tuple[str, ...] = ()
    build_dir: str | None = None

    def url(self, version: str) -> str:
        return self.url_template.format(version=version)

    def archive(self, version: str) -> str:
        return self.archive_template.format(version=version)

    def source_dir(self, version: str) -> str:
        return self.source_dir_template.format(version=version)


AOM = SourcePackage(
    name="aom",
    config_key="aom",
    url_template="https://github.com/jbeich/aom/archive/v{version}.tar.gz",
    archive_template="{version}.tar.gz",
    source_dir_template="aom-{version}",
    build_system="cmake",
    configure_flags=("-DENABLE_TESTS=0", "-DBUILD_SHARED_LIBS=1"),
    build_dir="build_aom",
)

LIBHEIF = SourcePackage(
    name="libheif",
    config_key="libheif",
    url_template="https://github.com/strukturag/libheif/releases/download/v{version}/libheif-{version}.tar.gz",
    archive_template="libheif-{version}.tar.gz",
    source_dir_template="libheif-{version}",
    build_system="autotools",
)

IMAGEMAGICK = SourcePackage(
    name="ImageMagick",
    config_key="imagemagick",
    url_template="https://github.com/ImageMagick/ImageMagick/archive/{version}.tar.gz",
    archive_template="ImageMagick-{version}.tar.gz",
    source_dir_template="ImageMagick-{version}",
    build_system="autotools",
    configure_flags=("--without-magick-plus-plus", "--disable-docs", "--with-heic=yes"),
)


@dataclass
class BuildPlan:
    """Commands for one package, in order, with their working directories."""

    package: SourcePackage
    version: str
    commands: list[Tuple[list[str], str]] = field(default_factory=list)

    def add(self, argv: list[str], cwd: Path) -> None:
        self.commands.append((argv, str(cwd)))


def plan_build(pkg: SourcePackage, version: str, cfg: InstallConfig) -> BuildPlan:
    work = Path(cfg.work_dir)
    src = work / pkg.source_dir(version)
    archive = pkg.archive(version)
    jobs = cfg.make_jobs

    plan = BuildPlan(package=pkg, version=version)
    plan.add(["wget", "-qc", pkg.url(version), "-O", archive], work)
    plan.add(["tar", "-xf", archive], work)

    if pkg.build_system == "cmake":
        build = work / (pkg.build_dir or f"build_{pkg.config_key}")
        plan.add(["mkdir", "-p", str(build)], work)
        plan.add(["cmake", str(src), *pkg.configure_flags], build)
    elif pkg.build_system == "autotools":
        build = src
        plan.add(["./configure", *pkg.configure_flags], build)
    else:
        raise ValueError(f"Unsupported build system for {pkg.name}: {pkg.build_system}")

    plan.add(["make", *jobs], build)
    plan.add(["make", *jobs, "install"], build)
    plan.add(["ldconfig"], work)
    return plan


def build_from_source(pkg: SourcePackage, cfg: InstallConfig) -> BuildPlan:
    """Download, configure, compile and install one package.

    Output of every command is appended to the log sink. The first failing
    command aborts with `BuildError`; nothing is rolled back.
    """

    version = cfg.version_of(pkg.config_key).strip()
    if not version:
        raise BuildError(pkg.name, "no version resolved")

    Path(cfg.work_dir).mkdir(parents=True, exist_ok=True)

    plan = plan_build(pkg, version, cfg)
    logger.info("Building %s %s (%d commands)", pkg.name, version, len(plan.commands))

    for argv, cwd in plan.commands:
        try:
            run_cmd(argv, cwd=cwd, env=cfg.env, log_file=cfg.log_path, dry_run=cfg.dry_run)
        except (CommandError, OSError) as e:
            raise BuildError(pkg.name, str(e)) from e

    logger.info("%s %s installed", pkg.name, version)
    return plan

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass

from .command import CommandError, command_exists, run_cmd

logger = logging.getLogger(__name__)

SLOW_BUILD_CORES = 4


@dataclass(frozen=True)
class HostInfo:
    distro: str
    arch: str
    cores: int

    @property
    def slow_build(self) -> bool:
        return self.cores < SLOW_BUILD_CORES


def is_root() -> bool:
    return os.geteuid() == 0


def os_distro() -> str:
    """Human readable distribution name from ``lsb_release -ds``."""

    if not command_exists("lsb_release"):
        return "unknown"
    try:
        r = run_cmd(["lsb_release", "-ds"])
    except CommandError:
        return "unknown"
    return r.stdout.strip().strip('"') or "unknown"


def detect_host(cores: int) -> HostInfo:
    host = HostInfo(distro=os_distro(), arch=platform.machine() or "unknown", cores=cores)
    logger.info("Host: distro=%s arch=%s cores=%s", host.distro, host.arch, host.cores)
    return host

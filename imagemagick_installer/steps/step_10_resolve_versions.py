from __future__ import annotations

import dataclasses
import logging

import httpx

from ..config import PACKAGES, InstallConfig
from ..errors import ResolutionError
from ..lib.releases import latest_version

logger = logging.getLogger(__name__)


class ResolveVersionsStep:
    step_id = "10_resolve_versions"
    label = "Resolving versions"

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def run(self, cfg: InstallConfig) -> InstallConfig:
        resolved = {}
        for package in PACKAGES:
            explicit = cfg.version_of(package).strip()
            if explicit:
                logger.info("Using requested %s version %s", package, explicit)
                continue
            resolved[f"{package}_version"] = latest_version(self.client, package)

        cfg = dataclasses.replace(cfg, **resolved)

        missing = cfg.missing_versions
        if missing:
            raise ResolutionError(", ".join(missing))

        logger.info("Versions: %s", cfg.versions)
        return cfg

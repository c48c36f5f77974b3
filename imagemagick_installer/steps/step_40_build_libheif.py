from __future__ import annotations

from ..config import InstallConfig
from ..lib.source_build import LIBHEIF, build_from_source


class BuildLibheifStep:
    step_id = "40_build_libheif"
    label = "Building libheif"
    requires_versions = True

    def run(self, cfg: InstallConfig) -> InstallConfig:
        build_from_source(LIBHEIF, cfg)
        return cfg

from __future__ import annotations

from ..config import InstallConfig
from ..lib.source_build import AOM, build_from_source


class BuildAomStep:
    step_id = "30_build_aom"
    label = "Building aom"
    requires_versions = True

    def run(self, cfg: InstallConfig) -> InstallConfig:
        build_from_source(AOM, cfg)
        return cfg

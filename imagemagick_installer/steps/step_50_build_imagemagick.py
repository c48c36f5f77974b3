from __future__ import annotations

import logging

from ..config import InstallConfig
from ..lib.source_build import IMAGEMAGICK, build_from_source

logger = logging.getLogger(__name__)


class BuildImageMagickStep:
    step_id = "50_build_imagemagick"
    label = "Building ImageMagick"
    requires_versions = True

    def run(self, cfg: InstallConfig) -> InstallConfig:
        # C++ bindings and docs are off, HEIC goes through the libheif built before.
        plan = build_from_source(IMAGEMAGICK, cfg)
        logger.info("ImageMagick configure flags: %s", " ".join(plan.package.configure_flags))
        return cfg

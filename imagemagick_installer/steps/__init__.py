from .step_10_resolve_versions import ResolveVersionsStep
from .step_20_install_dependencies import InstallDependenciesStep
from .step_30_build_aom import BuildAomStep
from .step_40_build_libheif import BuildLibheifStep
from .step_50_build_imagemagick import BuildImageMagickStep
from .step_90_finalize import FinalizeStep

__all__ = [
    "ResolveVersionsStep",
    "InstallDependenciesStep",
    "BuildAomStep",
    "BuildLibheifStep",
    "BuildImageMagickStep",
    "FinalizeStep",
]

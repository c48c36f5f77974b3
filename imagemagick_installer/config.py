from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .lib.env import BASE_ENV, PATHS

PACKAGES = ("imagemagick", "aom", "libheif")

DEFAULT_START_DELAY = 3.0

_SECTIONS = ("paths", "apt", "versions")


@dataclass(frozen=True)
class FileConfig:
    """Optional YAML overrides (``--config``)."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def _paths(self) -> Dict[str, Any]:
        return self.raw.get("paths") or {}

    def _apt(self) -> Dict[str, Any]:
        return self.raw.get("apt") or {}

    @property
    def work_dir(self) -> Optional[str]:
        v = self._paths().get("work_dir")
        return str(v) if v else None

    @property
    def log_file(self) -> Optional[str]:
        v = self._paths().get("log_file")
        return str(v) if v else None

    @property
    def pin_file(self) -> Optional[str]:
        v = self._paths().get("pin_file")
        return str(v) if v else None

    @property
    def sources_list(self) -> Optional[str]:
        v = self._apt().get("sources_list")
        return str(v) if v else None

    @property
    def sources_dir(self) -> Optional[str]:
        v = self._apt().get("sources_dir")
        return str(v) if v else None

    @property
    def start_delay(self) -> Optional[float]:
        v = self.raw.get("start_delay")
        return None if v is None else float(v)

    def version(self, package: str) -> str:
        return str((self.raw.get("versions") or {}).get(package) or "")


def load_file_config(path: Optional[str]) -> FileConfig:
    if not path:
        return FileConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read the installer config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"installer config {path} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError("installer config must contain a mapping/object")

    for section in _SECTIONS:
        if raw.get(section) is not None and not isinstance(raw[section], dict):
            raise ValueError(f"installer config section '{section}' must be a mapping")

    return FileConfig(raw=raw)


@dataclass(frozen=True)
class InstallConfig:
    imagemagick_version: str = ""
    aom_version: str = ""
    libheif_version: str = ""
    ci: bool = False
    dry_run: bool = False
    work_dir: str = PATHS.work_dir
    log_path: str = PATHS.log_default
    pin_file: str = PATHS.pin_file
    sources_list: str = PATHS.sources_list
    sources_dir: str = PATHS.sources_dir
    cores: int = 1
    start_delay: float = DEFAULT_START_DELAY
    env: Mapping[str, str] = field(default_factory=lambda: dict(BASE_ENV))

    def version_of(self, package: str) -> str:
        return str(getattr(self, f"{package}_version"))

    @property
    def versions(self) -> Dict[str, str]:
        return {p: self.version_of(p) for p in PACKAGES}

    @property
    def missing_versions(self) -> list[str]:
        return [p for p in PACKAGES if not self.version_of(p).strip()]

    @property
    def make_jobs(self) -> list[str]:
        return make_flags(self.cores)


def make_flags(cores: int) -> list[str]:
    """``make`` parallelism: one job more than cores, load capped at cores."""

    cores = max(1, int(cores))
    return [f"-j{cores + 1}", f"-l{cores}"]


def detect_cores() -> int:
    return os.cpu_count() or 1


def build_install_config(
    *,
    file_cfg: FileConfig,
    imagemagick_version: Optional[str] = None,
    aom_version: Optional[str] = None,
    libheif_version: Optional[str] = None,
    ci: bool = False,
    dry_run: bool = False,
    work_dir: Optional[str] = None,
    log_path: Optional[str] = None,
    cores: Optional[int] = None,
) -> InstallConfig:
    """CLI values win over the YAML file, which wins over defaults."""

    start_delay = file_cfg.start_delay
    return InstallConfig(
        imagemagick_version=(imagemagick_version or file_cfg.version("imagemagick")).strip(),
        aom_version=(aom_version or file_cfg.version("aom")).strip(),
        libheif_version=(libheif_version or file_cfg.version("libheif")).strip(),
        ci=ci,
        dry_run=dry_run,
        work_dir=work_dir or file_cfg.work_dir or PATHS.work_dir,
        log_path=log_path or file_cfg.log_file or PATHS.log_default,
        pin_file=file_cfg.pin_file or PATHS.pin_file,
        sources_list=file_cfg.sources_list or PATHS.sources_list,
        sources_dir=file_cfg.sources_dir or PATHS.sources_dir,
        cores=cores if cores is not None else detect_cores(),
        start_delay=DEFAULT_START_DELAY if start_delay is None else start_delay,
    )

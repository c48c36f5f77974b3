from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    work_dir: str = "/usr/local/src/imagemagick-installer"
    log_default: str = "/var/log/install-imagemagick.log"
    pin_file: str = "/etc/apt/preferences.d/imagemagick.pref"
    sources_list: str = "/etc/apt/sources.list"
    sources_dir: str = "/etc/apt/sources.list.d"


PATHS = Paths()

# Subprocess environment shared by every step.
BASE_ENV = {"DEBIAN_FRONTEND": "noninteractive"}

INSTALLER_UPDATE_URL = "https://1-2.dev/im"

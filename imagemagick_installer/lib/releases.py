from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from ..errors import ResolutionError
from ..version import strip_v

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
USER_AGENT = "imagemagick-installer"


@dataclass(frozen=True)
class ReleaseSource:
    """Where the latest version of a package is published."""

    package: str
    url: str
    extract: Callable[[Any], str]


def _tag_name(payload: Any) -> str:
    if not isinstance(payload, dict):
        return ""
    return str(payload.get("tag_name") or "")


def _first_tag(payload: Any) -> str:
    if not isinstance(payload, list) or not payload:
        return ""
    first = payload[0]
    if not isinstance(first, dict):
        return ""
    return str(first.get("name") or "")


RELEASE_SOURCES: Dict[str, ReleaseSource] = {
    "imagemagick": ReleaseSource(
        package="imagemagick",
        url=f"{GITHUB_API}/repos/ImageMagick/ImageMagick/releases/latest",
        extract=_tag_name,
    ),
    # aom publishes tags only, newest first.
    "aom": ReleaseSource(
        package="aom",
        url=f"{GITHUB_API}/repos/jbeich/aom/tags",
        extract=_first_tag,
    ),
    "libheif": ReleaseSource(
        package="libheif",
        url=f"{GITHUB_API}/repos/strukturag/libheif/releases/latest",
        extract=_tag_name,
    ),
}


def build_client(*, timeout_s: float = 30.0, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Create the `httpx.Client` used for every lookup."""

    return httpx.Client(
        timeout=httpx.Timeout(timeout_s),
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"},
        transport=transport,
    )


def latest_version(client: httpx.Client, package: str) -> str:
    """Return the latest published version of ``package`` without a leading ``v``."""

    source = RELEASE_SOURCES.get(package)
    if source is None:
        raise ResolutionError(package, "no release source known")

    logger.info("Looking up latest %s release: %s", package, source.url)
    try:
        response = client.get(source.url)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise ResolutionError(package, str(e)) from e

    version = strip_v(source.extract(payload))
    if not version:
        raise ResolutionError(package, "empty release tag")

    logger.info("Latest %s release: %s", package, version)
    return version


_INSTALLER_VERSION_RE = re.compile(r"Version\s+:\s+([\d.]+)")


def published_installer_version(client: httpx.Client, url: str) -> Optional[str]:
    """Best-effort lookup of the published installer version."""

    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.info("Installer update check skipped: %s", e)
        return None

    m = _INSTALLER_VERSION_RE.search(response.text)
    return m.group(1) if m else None

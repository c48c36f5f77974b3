from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Mapping, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

DPKG_KEEP_CONFIG = [
    "-o",
    "Dpkg::Options::=--force-confmiss",
    "-o",
    "Dpkg::Options::=--force-confold",
]


def apt_update(*, env: Mapping[str, str] | None = None, log_file: str | None = None, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "update", "-qq"], env=env, log_file=log_file, dry_run=dry_run)


def apt_install(
    packages: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    log_file: str | None = None,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    run_cmd(
        ["apt-get", *DPKG_KEEP_CONFIG, "-y", "install", *packages],
        env=env,
        log_file=log_file,
        dry_run=dry_run,
    )


def apt_build_dep(
    package: str,
    *,
    env: Mapping[str, str] | None = None,
    log_file: str | None = None,
    dry_run: bool = False,
) -> None:
    run_cmd(["apt-get", "build-dep", "-y", package], env=env, log_file=log_file, dry_run=dry_run)


def apt_purge(
    package: str,
    *,
    env: Mapping[str, str] | None = None,
    log_file: str | None = None,
    dry_run: bool = False,
) -> None:
    run_cmd(
        ["apt-get", "remove", "-y", "--autoremove", "--purge", package],
        env=env,
        log_file=log_file,
        dry_run=dry_run,
    )


def is_installed(package: str, *, dry_run: bool = False) -> bool:
    """Return True if dpkg reports ``package`` as installed."""

    if dry_run:
        return False
    r = run_cmd(["dpkg-query", "-W", "-f=${Status}", package], check=False)
    return r.returncode == 0 and "install ok installed" in r.stdout


def missing_packages(packages: Sequence[str], *, dry_run: bool = False) -> list[str]:
    return [p for p in packages if not is_installed(p, dry_run=dry_run)]


_DEB_SRC_COMMENTED = re.compile(r"^#\s*deb-src\s", re.MULTILINE)
_DEB822_TYPES = re.compile(r"^Types:(.*)$", re.MULTILINE)


def enable_deb_src_lines(text: str) -> str:
    """Uncomment ``# deb-src`` lines of a one-line-style sources.list."""

    return _DEB_SRC_COMMENTED.sub("deb-src ", text)


def enable_deb822_sources(text: str) -> str:
    """Add ``deb-src`` to every ``Types:`` field of a deb822 .sources file."""

    def _add(m: re.Match) -> str:
        types = m.group(1).split()
        if "deb" in types and "deb-src" not in types:
            types.append("deb-src")
        return "Types: " + " ".join(types)

    return _DEB822_TYPES.sub(_add, text)


def enable_source_repositories(*, sources_list: str, sources_dir: str, dry_run: bool = False) -> list[str]:
    """Enable source repositories so ``apt-get build-dep`` works.

    Returns the files that were changed.
    """

    changed: list[str] = []
    candidates: list[tuple[Path, Callable[[str], str]]] = []

    p = Path(sources_list)
    if p.exists():
        candidates.append((p, enable_deb_src_lines))

    d = Path(sources_dir)
    if d.is_dir():
        for f in sorted(d.glob("*.list")):
            candidates.append((f, enable_deb_src_lines))
        for f in sorted(d.glob("*.sources")):
            candidates.append((f, enable_deb822_sources))

    for path, transform in candidates:
        before = path.read_text(encoding="utf-8")
        after = transform(before)
        if after == before:
            continue
        if dry_run:
            logger.info("Would enable source repositories in %s", str(path))
        else:
            path.write_text(after, encoding="utf-8")
            logger.info("Enabled source repositories in %s", str(path))
        changed.append(str(path))

    return changed

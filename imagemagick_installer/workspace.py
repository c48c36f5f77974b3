from __future__ import annotations

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .errors import InstallerError

logger = logging.getLogger(__name__)


@contextmanager
def workspace(path: str, *, keep: bool = False) -> Iterator[Path]:
    """Create the work directory and remove it on every exit path.

    ``keep=True`` (CI mode) leaves it in place for inspection. A directory
    that cannot be created is never removed.
    """

    p = Path(path)
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallerError(f"Unable to create work directory {p}: {e}") from e
    try:
        yield p
    finally:
        if keep:
            logger.info("Keeping work directory %s", str(p))
        else:
            logger.info("Removing work directory %s", str(p))
            shutil.rmtree(p, ignore_errors=True)

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default

_HANDLER_ATTR = "_imagemagick_installer_handlers"


@dataclass(frozen=True)
class LogSink:
    """Append-only destination shared by the logger and every subprocess."""

    path: str

    def reset(self) -> None:
        p = Path(self.path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("", encoding="utf-8")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = False,
) -> LogSink:
    """Configure logging.

    The log file is truncated first and then opened in append mode; build tools
    write into the same file through their own descriptors, so every writer
    must append.

    Console output is off by default: the terminal belongs to the status lines.
    Calling this again replaces the handlers installed by the previous call.
    """

    root = logging.getLogger()
    root.setLevel(level)

    for h in getattr(root, _HANDLER_ATTR, []):
        root.removeHandler(h)
        h.close()

    sink = LogSink(path=log_path)
    sink.reset()

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handlers: list[logging.Handler] = []
    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        root.addHandler(h)

    setattr(root, _HANDLER_ATTR, handlers)

    logging.getLogger(__name__).info("Logging initialized (path=%s)", log_path)
    return sink


def close_logging() -> Optional[str]:
    root = logging.getLogger()
    handlers = getattr(root, _HANDLER_ATTR, [])
    path: Optional[str] = None
    for h in handlers:
        if isinstance(h, logging.FileHandler):
            path = h.baseFilename
        root.removeHandler(h)
        h.close()
    setattr(root, _HANDLER_ATTR, [])
    return path

from __future__ import annotations

import logging

from .errors import PreconditionError
from .lib.command import CommandError, command_exists, run_cmd
from .lib.env import BASE_ENV
from .lib.host import is_root

logger = logging.getLogger(__name__)


def check_preconditions(*, dry_run: bool = False) -> None:
    """Checks that must pass before anything touches the network or the log.

    Dry runs may be started by an unprivileged user.
    """

    if not dry_run and not is_root():
        raise PreconditionError("You must be root or use sudo to run this installer")

    if not command_exists("apt-get"):
        raise PreconditionError("This installer cannot run on any other system than Debian or Ubuntu")

    if not command_exists("lsb_release"):
        try:
            run_cmd(["apt-get", "install", "-qq", "lsb-release"], env=BASE_ENV, dry_run=dry_run)
        except (CommandError, OSError) as e:
            raise PreconditionError(f"Unable to install lsb-release: {e}") from e

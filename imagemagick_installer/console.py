"""Terminal presentation (Rich).

Only single-line progress indicators reach the terminal; command output goes
to the log file.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import InstallConfig
from .errors import InstallerError, VerificationError
from .lib.host import HostInfo
from .pipeline import PipelineResult, Step

LABEL_WIDTH = 36


def status_line(label: str, status: str, style: str) -> Text:
    return Text.assemble(" ", label.ljust(LABEL_WIDTH), " [", (status, style), "]")


class StatusReporter:
    """Prints one status line per step and the final summary."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(highlight=False)

    def banner(self, installer_version: str, newer: Optional[str] = None) -> None:
        self.console.print(" ###########################################")
        self.console.print(f" Welcome to the ImageMagick installer {installer_version}")
        self.console.print(" ###########################################")
        self.console.print("")
        if newer:
            self.console.print(Text(f" A newer installer version ({newer}) is available!", style="bold yellow"))
            self.console.print("")

    def host_summary(self, host: HostInfo) -> None:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Key", no_wrap=True)
        table.add_column("Value")
        table.add_row("Detected OS", f": {host.distro}")
        table.add_row("Detected Arch", f": {host.arch}")
        cores = Text(f": {host.cores}")
        if host.slow_build:
            cores.append(" (Slow compilation)", style="bold yellow")
        table.add_row("Detected Cores", cores)
        self.console.print(table)
        self.console.print("")

    def versions_summary(self, cfg: InstallConfig) -> None:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Package", no_wrap=True)
        table.add_column("Version")
        table.add_row("ImageMagick release", f": {cfg.imagemagick_version}")
        table.add_row("aom release", f": {cfg.aom_version}")
        table.add_row("libheif release", f": {cfg.libheif_version}")
        self.console.print(table)
        self.console.print("")

    def section(self, title: str) -> None:
        self.console.print(" #####################")
        self.console.print(f" {title}")
        self.console.print(" #####################")
        self.console.print("")

    def error(self, message: str) -> None:
        self.console.print(Text(f" {message}", style="bold red"))

    def log_pointer(self, log_path: str) -> None:
        self.console.print("")
        self.console.print(Text(f" Please check {log_path} for details.", style="bold cyan"))
        self.console.print("")

    # StepListener

    def started(self, step: Step) -> None:
        self.console.print(status_line(step.label, "..", ""), end="\r")

    def finished(self, step: Step, cfg: InstallConfig) -> None:
        self.console.print(status_line(step.label, "OK", "bold green"))
        verify_label = getattr(step, "verify_label", None)
        if verify_label and not cfg.dry_run:
            self.console.print(status_line(verify_label, "OK", "bold green"))
        if step.step_id == "10_resolve_versions":
            self.console.print("")
            self.versions_summary(cfg)

    def failed(self, step: Step, error: InstallerError) -> None:
        verify_label = getattr(step, "verify_label", None)
        if isinstance(error, VerificationError) and verify_label:
            self.console.print(status_line(step.label, "OK", "bold green"))
            self.console.print(status_line(verify_label, "FAILURE", "bold red"))
        else:
            self.console.print(status_line(step.label, "FAILURE", "bold red"))
        self.error(str(error))

    def summary(self, result: PipelineResult) -> None:
        log_path = result.cfg.log_path
        if result.failure is not None:
            self.log_pointer(log_path)
            return

        if result.warnings:
            self.log_pointer(log_path)
            return

        self.console.print("")
        self.console.print(Text(" ImageMagick was compiled successfully!", style="bold green"))
        self.console.print(f"\n Installation log : {log_path}\n")

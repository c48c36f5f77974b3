from __future__ import annotations


class InstallerError(RuntimeError):
    """Base class for every failure the installer reports to the operator."""


class PreconditionError(InstallerError):
    """Privilege, OS family or tooling checks failed."""


class ResolutionError(InstallerError):
    def __init__(self, package: str, reason: str = "") -> None:
        self.package = package
        msg = f"Unable to determine version number for {package}"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class DependencyError(InstallerError):
    pass


class BuildError(InstallerError):
    def __init__(self, package: str, reason: str = "") -> None:
        self.package = package
        msg = f"Building {package} failed"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class VerificationError(InstallerError):
    """Installed binary does not report the requested version. Non-fatal."""

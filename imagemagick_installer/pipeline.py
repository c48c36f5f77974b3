from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from .config import InstallConfig
from .errors import InstallerError, ResolutionError, VerificationError

logger = logging.getLogger(__name__)


class Step(Protocol):
    """One unit of work that succeeds or fails as a whole."""

    step_id: str
    label: str

    def run(self, cfg: InstallConfig) -> InstallConfig:
        ...


@dataclass(frozen=True)
class StepFailure:
    step_id: str
    label: str
    error: InstallerError
    log_path: str


@dataclass(frozen=True)
class PipelineResult:
    cfg: InstallConfig
    ran_steps: List[str]
    failure: Optional[StepFailure] = None
    warnings: List[StepFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failure is None


class StepListener(Protocol):
    def started(self, step: Step) -> None:
        ...

    def finished(self, step: Step, cfg: InstallConfig) -> None:
        ...

    def failed(self, step: Step, error: InstallerError) -> None:
        ...


class _SilentListener:
    def started(self, step: Step) -> None:
        pass

    def finished(self, step: Step, cfg: InstallConfig) -> None:
        pass

    def failed(self, step: Step, error: InstallerError) -> None:
        pass


def run_pipeline(
    *,
    cfg: InstallConfig,
    steps: Sequence[Step],
    listener: Optional[StepListener] = None,
) -> PipelineResult:
    """Run steps in order; stop at the first failure.

    A `VerificationError` is recorded as a warning and the pipeline carries on.
    Any other `InstallerError` ends the run with a `StepFailure`.
    """

    listener = listener or _SilentListener()
    ran: List[str] = []
    warnings: List[StepFailure] = []

    for step in steps:
        logger.info("Running step %s", step.step_id)
        listener.started(step)
        try:
            if getattr(step, "requires_versions", False) and cfg.missing_versions:
                raise ResolutionError(", ".join(cfg.missing_versions), "version missing before build")
            cfg = step.run(cfg)
        except VerificationError as e:
            logger.warning("Step %s: verification failed: %s", step.step_id, e)
            listener.failed(step, e)
            warnings.append(StepFailure(step.step_id, step.label, e, cfg.log_path))
            ran.append(step.step_id)
            continue
        except InstallerError as e:
            logger.error("Step %s failed: %s", step.step_id, e)
            listener.failed(step, e)
            failure = StepFailure(step.step_id, step.label, e, cfg.log_path)
            return PipelineResult(cfg=cfg, ran_steps=ran, failure=failure, warnings=warnings)

        listener.finished(step, cfg)
        ran.append(step.step_id)

    return PipelineResult(cfg=cfg, ran_steps=ran, warnings=warnings)

"""Run modes, per-row outcomes and the statistics they feed."""

import logging
import time
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel

from migro.engine.block import BoundaryPolicy
from migro.engine.plan import EditPlan, PlanKind
from migro.utils.log import logger as default_logger


class EngineConfig(BaseModel):
    blank_lines: BoundaryPolicy = BoundaryPolicy.SKIP
    """Whether blank lines are skipped or end the attribute block."""


class Mode(str, Enum):
    INTERACTIVE = "interactive"
    OVERWRITE = "overwrite"
    PREVIEW = "preview"


class Outcome(str, Enum):
    NOOP = "noop"
    PREVIEWED = "previewed"
    APPLIED = "applied"
    DECLINED = "declined"
    NOT_FOUND = "not_found"
    INELIGIBLE = "ineligible"
    ERROR = "error"


@dataclass
class RunStats:
    total_files: int = 0
    files_modified: int = 0
    files_skipped: int = 0
    attributes_added: int = 0
    attributes_replaced: int = 0
    errors: int = 0
    outcomes: Counter = field(default_factory=Counter)
    started_at: float = field(default_factory=time.monotonic)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def record(self, outcome: Outcome, kind: PlanKind | None = None) -> None:
        """Count one mapping row. Every row ends up either modified or skipped."""
        self.total_files += 1
        self.outcomes[outcome] += 1
        if outcome is Outcome.APPLIED:
            self.files_modified += 1
            if kind is PlanKind.REPLACE:
                self.attributes_replaced += 1
            else:
                self.attributes_added += 1
            return
        self.files_skipped += 1
        if outcome is Outcome.ERROR:
            self.errors += 1

    def as_dict(self) -> dict:
        return {
            "total_files": self.total_files,
            "files_modified": self.files_modified,
            "files_skipped": self.files_skipped,
            "attributes_added": self.attributes_added,
            "attributes_replaced": self.attributes_replaced,
            "errors": self.errors,
            "outcomes": {o.value: n for o, n in self.outcomes.items()},
            "elapsed": self.elapsed,
        }


def _decline(message: str) -> bool:
    return False


@dataclass
class RunContext:
    """Everything a run needs besides the file contents. One per CLI invocation."""

    mode: Mode = Mode.INTERACTIVE
    engine: EngineConfig = field(default_factory=EngineConfig)
    confirm_inserts: bool = False
    confirm: Callable[[str], bool] = _decline
    """Asked before applying a change in interactive mode. Must return True to apply."""
    stats: RunStats = field(default_factory=RunStats)
    logger: logging.Logger = default_logger


CONFIRM_MESSAGE = "❓ Do you want to apply this change? (y/N): "


def decide(plan: EditPlan, ctx: RunContext) -> Outcome:
    """Turn a plan into an outcome for the current mode. Never touches files.

    Returns `Outcome.APPLIED` when the caller should write the change.
    """
    log = ctx.logger
    if plan.kind is PlanKind.NOOP:
        return Outcome.NOOP
    if ctx.mode is Mode.PREVIEW:
        log.info("   [PREVIEW MODE] - No changes will be applied.")
        return Outcome.PREVIEWED

    if ctx.mode is Mode.OVERWRITE:
        if plan.kind is PlanKind.REPLACE:
            log.info("   👉 Overwriting due to --overwrite flag.")
        return Outcome.APPLIED
    if plan.kind is PlanKind.INSERT and not ctx.confirm_inserts:
        return Outcome.APPLIED
    if ctx.confirm(CONFIRM_MESSAGE):
        log.info("   ✅ User confirmed change.")
        return Outcome.APPLIED
    log.info("   ❌ User declined change.")
    return Outcome.DECLINED

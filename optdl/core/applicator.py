"""
Batch application of configured optical disk states.

Each configured disk is tested and, when out of state, converged. A fatal
error on one disk is recorded and the remaining disks are still processed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from optdl.core.errors import OptdlError
from optdl.core.logger import get_logger
from optdl.core.resource import OpticalDiskDriveLetter
from optdl.models.disk import DesiredState

logger = get_logger(__name__)


class ApplyStatus:
    """Per-disk outcomes of an apply run."""

    IN_DESIRED_STATE = "in-desired-state"
    CHANGED = "changed"
    WOULD_CHANGE = "would-change"
    FAILED = "failed"


@dataclass
class ApplyOutcome:
    desired: DesiredState
    status: str
    message: str = ""

    @property
    def failed(self) -> bool:
        return self.status == ApplyStatus.FAILED


def apply_resources(
    resource: OpticalDiskDriveLetter,
    desired_states: Iterable[DesiredState],
    dry_run: bool = False,
) -> List[ApplyOutcome]:
    """Test each desired state and set it when it does not match.

    Args:
        resource: Resource wired to the target host
        desired_states: States to converge, in order
        dry_run: Only test, never set

    Returns:
        One ApplyOutcome per desired state
    """
    outcomes: List[ApplyOutcome] = []

    for desired in desired_states:
        label = f"disk {desired.disk_id} -> {desired.drive_letter} ({desired.ensure.value})"
        try:
            if resource.reconciler.test(desired):
                outcomes.append(ApplyOutcome(desired, ApplyStatus.IN_DESIRED_STATE))
                continue

            if dry_run:
                logger.info(f"DRY RUN: would converge {label}")
                outcomes.append(ApplyOutcome(desired, ApplyStatus.WOULD_CHANGE))
                continue

            resource.reconciler.set(desired)
            outcomes.append(ApplyOutcome(desired, ApplyStatus.CHANGED))
        except OptdlError as e:
            logger.error(f"Failed to converge {label}: {e}")
            outcomes.append(ApplyOutcome(desired, ApplyStatus.FAILED, message=str(e)))

    return outcomes


def summarize_outcomes(outcomes: Iterable[ApplyOutcome]) -> dict:
    """Count outcomes per status."""
    counts: dict = {}
    for outcome in outcomes:
        counts[outcome.status] = counts.get(outcome.status, 0) + 1
    return counts

"""
Data models for batch lifecycle runs.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class LifecycleAction(Enum):
    """Operation applied uniformly to every Container App in a batch."""
    START = "start"
    STOP = "stop"

    @property
    def label(self) -> str:
        """Capitalised name used in log file names ("Start", "Stop")."""
        return self.value.capitalize()

    @property
    def past_tense(self) -> str:
        return "started" if self is LifecycleAction.START else "stopped"


class OutcomeStatus(Enum):
    """Result of one lifecycle call."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ContainerAppRef:
    """A Container App selected for a batch."""
    name: str
    environment_id: str
    resource_group: str


@dataclass(frozen=True)
class OutcomeRecord:
    """Outcome of applying an action to one Container App."""
    name: str
    action: LifecycleAction
    status: OutcomeStatus
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "action": self.action.value, "status": self.status.value}
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class BatchReport:
    """
    Aggregate over every OutcomeRecord of one run.

    Counts are derived from the records, so succeeded + failed always equals
    total, and total equals the number of Container Apps handed to the runner.
    """
    action: LifecycleAction
    records: List[OutcomeRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def succeeded(self) -> int:
        return sum(1 for record in self.records if record.succeeded)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def nothing_to_do(self) -> bool:
        """True when discovery found no Container Apps."""
        return self.total == 0

    @property
    def exit_code(self) -> int:
        # Partial success is still a failure.
        return EXIT_FAILURE if self.failed > 0 else EXIT_SUCCESS

    def failures(self) -> List[OutcomeRecord]:
        return [record for record in self.records if not record.succeeded]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "records": [record.to_dict() for record in self.records],
        }

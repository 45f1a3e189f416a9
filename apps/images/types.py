"""
Value types passed between the storage clients and the image processor.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class QueueReceipt:
    """Identity of one queue message instance: its id and current pop receipt."""

    message_id: str
    pop_receipt: str


@dataclass(frozen=True)
class DetectedFace:
    """A face returned by the Face API with its estimated age."""

    age: float

    @property
    def age_label(self) -> str:
        # Ages come back as floats (34.0); store "34" like the API's whole-year estimate
        if float(self.age).is_integer():
            return str(int(self.age))
        return str(self.age)


class UnitOutcome(str, Enum):
    ACKNOWLEDGED = "acknowledged"
    ABANDONED = "abandoned"
    FAILED = "failed"


@dataclass
class UnitResult:
    """Result of processing one image end to end."""

    file_name: str
    outcome: UnitOutcome
    face_count: int = 0
    error: Optional[str] = None


@dataclass
class BatchSummary:
    """Aggregated results for one run over the input directory."""

    results: List[UnitResult] = field(default_factory=list)

    def add(self, result: UnitResult) -> None:
        self.results.append(result)

    def count(self, outcome: UnitOutcome) -> int:
        return sum(1 for result in self.results if result.outcome == outcome)

    @property
    def acknowledged(self) -> int:
        return self.count(UnitOutcome.ACKNOWLEDGED)

    @property
    def abandoned(self) -> int:
        return self.count(UnitOutcome.ABANDONED)

    @property
    def failed(self) -> int:
        return self.count(UnitOutcome.FAILED)

    @property
    def pending_file_names(self) -> List[str]:
        """Images whose queue message was left for the reconciliation worker."""
        return [r.file_name for r in self.results if r.outcome != UnitOutcome.ACKNOWLEDGED]

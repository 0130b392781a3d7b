"""Cold-front evidence, record alerts and dispatch results."""

from dataclasses import dataclass, field
from enum import StrEnum


class RecordKind(StrEnum):
    LOW = "low"
    HIGH = "high"


class AlertType(StrEnum):
    COLD_FRONT = "cold_front"
    RECORD = "record"


class DispatchStatus(StrEnum):
    DRY_RUN = "DRY_RUN"
    SENT = "SENT"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ColdFrontDrop:
    index: int  # position of the colder day in the daily-min series
    previous: int
    current: int

    @property
    def drop(self) -> int:
        return self.previous - self.current


@dataclass(frozen=True)
class ColdFrontEvidence:
    detected: bool
    daily_mins: list[int]
    threshold: float
    drops: list[ColdFrontDrop] = field(default_factory=list)


@dataclass(frozen=True)
class RecordAlert:
    kind: RecordKind
    value: int


@dataclass(frozen=True)
class DispatchResult:
    alert_type: AlertType
    status: DispatchStatus
    title: str
    body: str
    error_message: str
    dispatched_at: str

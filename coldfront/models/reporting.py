"""Run reporting models."""

from dataclasses import dataclass, field

from coldfront.models.alerts import RecordAlert


@dataclass
class RunSummary:
    run_id: str
    mode: str
    location: str = ""
    samples: int = 0
    daily_mins: list[int] = field(default_factory=list)
    daily_maxes: list[int] = field(default_factory=list)
    lowest_min: int | None = None
    lowest_max: int | None = None
    cold_front: bool = False
    records: list[RecordAlert] = field(default_factory=list)
    alerts_sent: int = 0
    alerts_failed: int = 0
    aborted: bool = False
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)

"""Run summarizer: aggregates check outputs into a RunSummary."""

from coldfront.models.alerts import (
    ColdFrontEvidence,
    DispatchResult,
    DispatchStatus,
    RecordAlert,
)
from coldfront.models.reporting import RunSummary


class RunSummarizer:
    def __init__(self, run_id: str, mode: str):
        self.summary = RunSummary(run_id=run_id, mode=mode)

    def record_forecast(self, location: str, samples: int) -> None:
        self.summary.location = location
        self.summary.samples = samples

    def record_aggregates(self, daily_mins: list[int], daily_maxes: list[int]) -> None:
        self.summary.daily_mins = list(daily_mins)
        self.summary.daily_maxes = list(daily_maxes)
        self.summary.lowest_min = min(daily_mins) if daily_mins else None
        self.summary.lowest_max = min(daily_maxes) if daily_maxes else None

    def record_cold_front(self, evidence: ColdFrontEvidence) -> None:
        self.summary.cold_front = evidence.detected

    def record_record(self, alert: RecordAlert) -> None:
        self.summary.records.append(alert)

    def record_dispatch(self, result: DispatchResult) -> None:
        if result.status == DispatchStatus.FAILED:
            self.summary.alerts_failed += 1
        else:
            self.summary.alerts_sent += 1

    def record_abort(self, reason: str) -> None:
        self.summary.aborted = True
        self.summary.errors.append(reason)

    def record_duration(self, seconds: float) -> None:
        self.summary.duration_seconds = seconds

    def record_error(self, error: str) -> None:
        self.summary.errors.append(error)

    def finalize(self) -> RunSummary:
        return self.summary

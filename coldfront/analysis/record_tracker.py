"""Ratcheting record thresholds for the coldest low and the coldest high."""

import logging
from typing import Protocol

from coldfront.analysis.numeric import coerce_number, round_up_to_nearest_ten
from coldfront.models.alerts import RecordAlert, RecordKind

logger = logging.getLogger(__name__)

RECORD_LOW_KEY = "RECORD_LOW_ROUNDED_UP"
RECORD_HIGH_KEY = "RECORD_LOW_HIGH_ROUNDED_UP"
COLD_FRONT_THRESHOLD_KEY = "THRESHOLD"

STATE_KEYS: dict[RecordKind, str] = {
    RecordKind.LOW: RECORD_LOW_KEY,
    RecordKind.HIGH: RECORD_HIGH_KEY,
}


class StateStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class RecordThresholdTracker:
    """One ratchet: the persisted threshold only ever moves down.

    For RecordKind.HIGH the observed value is the lowest of the daily highs,
    i.e. a cold-high record, not a heat record.
    """

    def __init__(self, kind: RecordKind, store: StateStore):
        self.kind = kind
        self.key = STATE_KEYS[kind]
        self.store = store
        self._threshold: float | None = None

    @property
    def threshold(self) -> float:
        if self._threshold is None:
            return self.load()
        return self._threshold

    def load(self) -> float:
        """Read and coerce the persisted threshold."""
        self._threshold = coerce_number(self.store.get(self.key), self.key)
        return self._threshold

    def evaluate(self, observed_extreme: float) -> RecordAlert | None:
        """Persist and return a RecordAlert if the rounded-up candidate is a new low."""
        candidate = round_up_to_nearest_ten(observed_extreme)
        current = self.threshold
        logger.info(
            "Lowest %s %s is below %d (persisted threshold %g)",
            self.kind.value, observed_extreme, candidate, current,
        )
        if not candidate < current:
            return None

        self.store.set(self.key, str(candidate))
        self._threshold = candidate
        logger.info(
            "New %s record: %s lowered from %g to %d",
            self.kind.value, self.key, current, candidate,
        )
        return RecordAlert(kind=self.kind, value=candidate)

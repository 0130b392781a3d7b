"""Cold-front detection over a chronological series of daily minimums."""

from collections.abc import Sequence

from coldfront.models.alerts import ColdFrontDrop, ColdFrontEvidence


def find_cold_front_drops(
    daily_mins: Sequence[int], threshold: float
) -> list[ColdFrontDrop]:
    """Every adjacent-day drop of at least `threshold` degrees."""
    drops: list[ColdFrontDrop] = []
    for i in range(1, len(daily_mins)):
        previous, current = daily_mins[i - 1], daily_mins[i]
        if previous - current >= threshold:
            drops.append(ColdFrontDrop(index=i, previous=previous, current=current))
    return drops


def has_cold_front(daily_mins: Sequence[int], threshold: float) -> bool:
    return len(find_cold_front_drops(daily_mins, threshold)) > 0


def detect_cold_front(daily_mins: Sequence[int], threshold: float) -> ColdFrontEvidence:
    drops = find_cold_front_drops(daily_mins, threshold)
    return ColdFrontEvidence(
        detected=bool(drops),
        daily_mins=list(daily_mins),
        threshold=threshold,
        drops=drops,
    )

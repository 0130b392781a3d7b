"""Output formatters for run summaries."""

import json

from coldfront.models.reporting import RunSummary


def _fmt(value: int | None) -> str:
    return "n/a" if value is None else str(value)


def format_summary_text(s: RunSummary) -> str:
    """Plain text summary for logging."""
    lines = [f"=== Check Complete ({s.mode}) | Run {s.run_id[:8]} ==="]
    if s.aborted:
        lines.append("Aborted: " + "; ".join(s.errors))
        lines.append(f"Duration: {s.duration_seconds:.1f}s")
        return "\n".join(lines)

    days = len(s.daily_mins)
    lines.append(f"{days} day forecast for {s.location or 'unknown'} ({s.samples} samples)")
    lines.append(
        f"Daily mins: {', '.join(map(str, s.daily_mins)) or '-'}; "
        f"lowest = {_fmt(s.lowest_min)}"
    )
    lines.append(
        f"Daily maxes (full days): {', '.join(map(str, s.daily_maxes)) or '-'}; "
        f"lowest = {_fmt(s.lowest_max)}"
    )
    lines.append(
        "Cold front: " + ("yes (yay! 🍂🍁🎃)" if s.cold_front else "no (unfortunately)")
    )
    if s.records:
        lines.append(
            "New records: "
            + ", ".join(f"{r.kind.value} below {r.value}" for r in s.records)
        )
    lines.append(f"Alerts: {s.alerts_sent} sent, {s.alerts_failed} failed")
    if s.errors:
        lines.append(f"Errors: {len(s.errors)}")
    lines.append(f"Duration: {s.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_summary_json(s: RunSummary) -> str:
    """JSON summary for programmatic consumption."""
    data = {
        "run_id": s.run_id,
        "mode": s.mode,
        "location": s.location,
        "samples": s.samples,
        "daily_mins": s.daily_mins,
        "daily_maxes": s.daily_maxes,
        "lowest_min": s.lowest_min,
        "lowest_max": s.lowest_max,
        "cold_front": s.cold_front,
        "records": [{"kind": r.kind.value, "value": r.value} for r in s.records],
        "alerts_sent": s.alerts_sent,
        "alerts_failed": s.alerts_failed,
        "aborted": s.aborted,
        "duration_seconds": s.duration_seconds,
        "errors": s.errors,
    }
    return json.dumps(data, indent=2)

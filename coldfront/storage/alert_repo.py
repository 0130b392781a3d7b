"""Repository for dispatched alerts and threshold history."""

import sqlite3

from coldfront.models.alerts import DispatchResult


def save_alert(conn: sqlite3.Connection, run_id: str, result: DispatchResult) -> int:
    """Persist a dispatch outcome. Returns the row id."""
    cursor = conn.execute(
        "INSERT INTO alert_log "
        "(run_id, alert_type, status, title, body, error_message, dispatched_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)",
        (
            run_id,
            result.alert_type.value,
            result.status.value,
            result.title,
            result.body,
            result.error_message,
            result.dispatched_at,
        ),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_alerts_for_run(conn: sqlite3.Connection, run_id: str) -> list[dict]:
    rows = conn.execute(
        "SELECT * FROM alert_log WHERE run_id = ? ORDER BY id", (run_id,)
    ).fetchall()
    return [dict(r) for r in rows]


def get_recent_alerts(conn: sqlite3.Connection, limit: int = 10) -> list[dict]:
    rows = conn.execute(
        "SELECT * FROM alert_log ORDER BY id DESC LIMIT ?", (limit,)
    ).fetchall()
    return [dict(r) for r in rows]


def save_threshold_change(
    conn: sqlite3.Connection,
    key: str,
    old_value: str | None,
    new_value: str,
    run_id: str | None = None,
) -> int:
    cursor = conn.execute(
        "INSERT INTO threshold_history (run_id, key, old_value, new_value) "
        "VALUES (?, ?, ?, ?)",
        (run_id, key, old_value, new_value),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_threshold_history(conn: sqlite3.Connection, key: str | None = None) -> list[dict]:
    if key is None:
        rows = conn.execute("SELECT * FROM threshold_history ORDER BY id").fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM threshold_history WHERE key = ? ORDER BY id", (key,)
        ).fetchall()
    return [dict(r) for r in rows]

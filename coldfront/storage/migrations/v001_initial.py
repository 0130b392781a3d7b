"""Initial schema: key-value state, runs, alerts and threshold history."""

import sqlite3

DDL = [
    # Key-value state: record thresholds, cold-front threshold
    """
    CREATE TABLE IF NOT EXISTS system_state (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Every ratchet transition, for auditing a season's records
    """
    CREATE TABLE IF NOT EXISTS threshold_history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT,
        key TEXT NOT NULL,
        old_value TEXT,
        new_value TEXT NOT NULL,
        changed_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_threshold_history_key ON threshold_history(key)",

    # Dispatched alerts and their delivery outcome
    """
    CREATE TABLE IF NOT EXISTS alert_log (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT NOT NULL,
        alert_type TEXT NOT NULL,
        status TEXT NOT NULL,
        title TEXT NOT NULL,
        body TEXT NOT NULL,
        error_message TEXT NOT NULL DEFAULT '',
        dispatched_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_alert_log_run ON alert_log(run_id)",

    # Operator command audit log
    """
    CREATE TABLE IF NOT EXISTS operator_commands (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        command TEXT NOT NULL,
        args TEXT NOT NULL DEFAULT '',
        result TEXT NOT NULL DEFAULT '',
        executed_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Check run log
    """
    CREATE TABLE IF NOT EXISTS runs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT UNIQUE NOT NULL,
        mode TEXT NOT NULL,
        config_hash TEXT,
        started_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        completed_at TEXT,
        status TEXT NOT NULL DEFAULT 'running',
        samples INTEGER NOT NULL DEFAULT 0,
        days INTEGER NOT NULL DEFAULT 0,
        cold_front INTEGER NOT NULL DEFAULT 0,
        records INTEGER NOT NULL DEFAULT 0,
        summary_json TEXT,
        error_message TEXT
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()

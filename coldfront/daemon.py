"""Check daemon: runs the check pipeline on a fixed interval.

The PID file also keeps two daemons from racing on the persisted record
thresholds.

Usage:
    python -m coldfront daemon                 # every ops.check_interval_minutes
    python -m coldfront daemon --interval 600  # every 10 minutes
    python -m coldfront daemon --stop
    python -m coldfront daemon --status
"""

import json
import logging
import os
import signal
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

from coldfront.config.schema import AppConfig
from coldfront.pipeline.check_pipeline import DEFAULT_DB, CheckPipeline

logger = logging.getLogger(__name__)

MAX_BACKOFF = 6 * 3600
PID_DIR = Path("data")
PID_FILE = PID_DIR / "daemon.pid"
STATE_FILE = PID_DIR / "daemon_state.json"
LOG_DIR = Path("logs")
MAX_LOG_FILES = 100

RUN_COMPLETED = "completed"
RUN_ABORTED = "aborted"
RUN_FAILED = "failed"


class CheckDaemon:
    """Runs the check pipeline in a loop with failure backoff and signal handling."""

    def __init__(
        self,
        config: AppConfig,
        db_path: str = DEFAULT_DB,
        interval: int | None = None,
    ):
        self.config = config
        self.db_path = db_path
        self.interval = interval or config.ops.check_interval_minutes * 60
        self._running = False
        self._consecutive_failures = 0
        self._total_runs = 0
        self._total_successes = 0
        self._total_failures = 0
        self._total_aborted = 0
        self._started_at: str | None = None

    def start(self) -> None:
        self._check_not_already_running()
        self._write_pid()
        self._setup_signals()
        self._running = True
        self._started_at = datetime.now(UTC).isoformat()

        logger.info(
            "Daemon started: mode=%s interval=%ds pid=%d",
            self.config.notify.mode.value, self.interval, os.getpid(),
        )
        print(f"Check daemon started (pid {os.getpid()}, every {self.interval}s)")
        print(f"   Logs: {LOG_DIR}/")
        print("   Stop: python -m coldfront daemon --stop")

        try:
            self._loop()
        except KeyboardInterrupt:
            logger.info("Daemon interrupted by keyboard")
        finally:
            self._cleanup()

    def _loop(self) -> None:
        while self._running:
            run_start = time.monotonic()
            if self._run_once() != RUN_FAILED:
                # Aborted runs wait for the next scheduled check like any other.
                self._consecutive_failures = 0
                wait = self.interval
            else:
                self._consecutive_failures += 1
                wait = self._backoff()
                logger.warning(
                    "Check failed (%d consecutive), next attempt in %ds",
                    self._consecutive_failures, wait,
                )

            self._save_state()

            # 1-second naps so SIGTERM is honoured promptly
            sleep_until = run_start + wait
            while self._running and time.monotonic() < sleep_until:
                time.sleep(1)

    def _backoff(self) -> int:
        return min(self.interval * (2 ** (self._consecutive_failures - 1)), MAX_BACKOFF)

    def _run_once(self) -> str:
        """Execute a single check. Returns RUN_COMPLETED, RUN_ABORTED or RUN_FAILED."""
        self._total_runs += 1
        timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")

        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / f"check_{timestamp}.log")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)

        try:
            logger.info("=== Check #%d starting ===", self._total_runs)
            summary = CheckPipeline(self.config, self.db_path).run()
            if summary.aborted:
                self._total_aborted += 1
                logger.warning(
                    "Check #%d aborted, forecast unavailable: %s",
                    self._total_runs, summary.errors,
                )
                return RUN_ABORTED
            if summary.errors:
                self._total_failures += 1
                logger.error(
                    "Check #%d ended with errors: %s", self._total_runs, summary.errors
                )
                return RUN_FAILED
            self._total_successes += 1
            logger.info(
                "Check #%d OK: cold_front=%s records=%d",
                self._total_runs, summary.cold_front, len(summary.records),
            )
            return RUN_COMPLETED
        except Exception:
            self._total_failures += 1
            logger.exception("Check #%d crashed", self._total_runs)
            return RUN_FAILED
        finally:
            root_logger.removeHandler(file_handler)
            file_handler.close()
            self._rotate_logs()

    def _rotate_logs(self) -> None:
        if not LOG_DIR.exists():
            return
        logs = sorted(LOG_DIR.glob("check_*.log"))
        for old in logs[: max(0, len(logs) - MAX_LOG_FILES)]:
            old.unlink(missing_ok=True)

    def _setup_signals(self) -> None:
        def _stop(signum: int, frame: object) -> None:
            sig_name = signal.Signals(signum).name
            logger.info("Received %s, shutting down", sig_name)
            self._running = False

        signal.signal(signal.SIGTERM, _stop)
        signal.signal(signal.SIGINT, _stop)

    def _check_not_already_running(self) -> None:
        if not PID_FILE.exists():
            return
        try:
            pid = int(PID_FILE.read_text().strip())
            os.kill(pid, 0)
        except (ProcessLookupError, ValueError):
            # Stale PID file
            PID_FILE.unlink(missing_ok=True)
            return
        except PermissionError:
            print("Daemon may already be running, can't verify its PID.")
            sys.exit(1)
        print(f"Daemon already running (pid {pid}). Stop it first:")
        print("   python -m coldfront daemon --stop")
        sys.exit(1)

    def _write_pid(self) -> None:
        PID_DIR.mkdir(parents=True, exist_ok=True)
        PID_FILE.write_text(str(os.getpid()))

    def _save_state(self) -> None:
        PID_DIR.mkdir(parents=True, exist_ok=True)
        state = {
            "pid": os.getpid(),
            "started_at": self._started_at,
            "interval": self.interval,
            "mode": self.config.notify.mode.value,
            "total_runs": self._total_runs,
            "total_successes": self._total_successes,
            "total_failures": self._total_failures,
            "total_aborted": self._total_aborted,
            "consecutive_failures": self._consecutive_failures,
            "last_update": datetime.now(UTC).isoformat(),
        }
        STATE_FILE.write_text(json.dumps(state, indent=2))

    def _cleanup(self) -> None:
        PID_FILE.unlink(missing_ok=True)
        self._save_state()
        logger.info(
            "Daemon stopped: %d runs (%d ok, %d failed)",
            self._total_runs, self._total_successes, self._total_failures,
        )
        print(
            f"Daemon stopped: {self._total_runs} runs "
            f"({self._total_successes} ok, {self._total_failures} failed)"
        )


def stop_daemon(wait_seconds: int = 60) -> int:
    """Stop a running daemon by sending SIGTERM."""
    if not PID_FILE.exists():
        print("No daemon running (no PID file found)")
        return 1

    try:
        pid = int(PID_FILE.read_text().strip())
    except ValueError:
        print("Corrupt PID file, removing")
        PID_FILE.unlink(missing_ok=True)
        return 1

    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        print(f"Daemon not running (stale pid {pid}), cleaning up")
        PID_FILE.unlink(missing_ok=True)
        return 0

    print(f"Stopping daemon (pid {pid})...")
    os.kill(pid, signal.SIGTERM)
    for _ in range(wait_seconds):
        time.sleep(1)
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            print("Daemon stopped")
            PID_FILE.unlink(missing_ok=True)
            return 0

    print(f"Daemon didn't stop in {wait_seconds}s, sending SIGKILL")
    os.kill(pid, signal.SIGKILL)
    PID_FILE.unlink(missing_ok=True)
    return 0


def daemon_status() -> int:
    """Print daemon status from the state file."""
    if not STATE_FILE.exists():
        print("No daemon state found")
        return 1

    state = json.loads(STATE_FILE.read_text())
    pid = state.get("pid", "?")
    running = False
    try:
        os.kill(int(pid), 0)
        running = True
    except (ProcessLookupError, ValueError, TypeError):
        pass

    print(f"Daemon {'running' if running else 'stopped'}")
    print(f"  PID: {pid}")
    print(f"  Mode: {state.get('mode', 'unknown')}")
    print(f"  Interval: {state.get('interval', '?')}s")
    print(f"  Started: {state.get('started_at', '?')}")
    print(f"  Total runs: {state.get('total_runs', 0)}")
    print(f"  Successes: {state.get('total_successes', 0)}")
    print(f"  Failures: {state.get('total_failures', 0)}")
    print(f"  Aborted (forecast unavailable): {state.get('total_aborted', 0)}")
    print(f"  Consecutive failures: {state.get('consecutive_failures', 0)}")
    print(f"  Last update: {state.get('last_update', '?')}")
    return 0

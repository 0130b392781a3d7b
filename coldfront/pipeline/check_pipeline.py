"""Check pipeline: one full forecast evaluation run."""

import json
import logging
import time
import uuid

from coldfront.analysis.aggregator import (
    aggregate_daily_maximums,
    aggregate_daily_minimums,
)
from coldfront.analysis.cold_front import detect_cold_front
from coldfront.analysis.numeric import coerce_number
from coldfront.analysis.record_tracker import (
    COLD_FRONT_THRESHOLD_KEY,
    RecordThresholdTracker,
)
from coldfront.config.loader import config_hash
from coldfront.config.schema import AppConfig, NotifyMode
from coldfront.ingest.forecast_fetcher import ForecastFetcher
from coldfront.ingest.openweather_client import OpenWeatherClient
from coldfront.models.alerts import RecordKind
from coldfront.models.reporting import RunSummary
from coldfront.notify.dispatcher import AlertDispatcher
from coldfront.notify.dry_run import DryRunNotifier
from coldfront.notify.pushbullet_client import PushbulletClient
from coldfront.reporting.formatters import format_summary_json, format_summary_text
from coldfront.reporting.run_summarizer import RunSummarizer
from coldfront.storage import state_repo
from coldfront.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)

DEFAULT_DB = "data/coldfront.db"


class CheckPipeline:
    def __init__(
        self,
        config: AppConfig,
        db_path: str = DEFAULT_DB,
        fetcher: ForecastFetcher | None = None,
        notifier: DryRunNotifier | PushbulletClient | None = None,
    ):
        self.config = config
        self.db_path = db_path
        self.fetcher = fetcher
        self.notifier = notifier

    def _build_fetcher(self) -> ForecastFetcher:
        ow = self.config.openweather
        client = OpenWeatherClient(
            base_url=ow.base_url,
            units=ow.units.value,
            timeout=ow.timeout_seconds,
            max_retries=ow.max_retries,
            retry_base_delay=ow.retry_base_delay,
        )
        return ForecastFetcher(client)

    def _build_notifier(self) -> DryRunNotifier | PushbulletClient:
        if self.config.notify.mode == NotifyMode.PUSHBULLET:
            return PushbulletClient()
        return DryRunNotifier()

    def run(self) -> RunSummary:
        """Execute one check: retrieve, aggregate, detect, ratchet, dispatch."""
        start_time = time.monotonic()
        run_id = str(uuid.uuid4())
        mode = self.config.notify.mode.value
        location = self.config.location

        conn = connect(self.db_path)
        run_migrations(conn)
        state_repo.create_run(conn, run_id, mode, config_hash(self.config))
        summarizer = RunSummarizer(run_id, mode)

        try:
            # 1. RETRIEVE
            fetcher = self.fetcher or self._build_fetcher()
            result = fetcher.fetch(location)
            if not result.ok:
                assert result.error is not None
                logger.error("Forecast retrieval failed, aborting run: %s", result.error)
                summarizer.record_abort(str(result.error))
                summarizer.record_duration(time.monotonic() - start_time)
                state_repo.complete_run(
                    conn, run_id, "aborted", error_message=str(result.error)
                )
                return summarizer.finalize()

            forecast = result.forecast
            assert forecast is not None
            city = forecast.city_name or location.name
            summarizer.record_forecast(city, len(forecast.samples))

            # 2. VALIDATE STATE before touching anything
            store = state_repo.SqliteStateStore(conn, run_id)
            threshold = coerce_number(
                store.get(COLD_FRONT_THRESHOLD_KEY), COLD_FRONT_THRESHOLD_KEY
            )
            trackers = [RecordThresholdTracker(kind, store) for kind in RecordKind]
            for tracker in trackers:
                tracker.load()
            notifier = self.notifier or self._build_notifier()
            dispatcher = AlertDispatcher(conn, notifier, run_id)

            # 3. AGGREGATE
            tz = location.tzinfo()
            daily_mins = aggregate_daily_minimums(forecast.samples, tz)
            daily_maxes = aggregate_daily_maximums(forecast.samples, tz)
            summarizer.record_aggregates(daily_mins, daily_maxes)
            summary = summarizer.summary
            logger.info(
                "daily mins: %s; lowest = %s",
                ",".join(map(str, daily_mins)), summary.lowest_min,
            )
            logger.info(
                "daily maxes: %s; highest = %s; lowest = %s",
                ",".join(map(str, daily_maxes)),
                max(daily_maxes) if daily_maxes else None,
                summary.lowest_max,
            )

            # 4. COLD FRONT
            evidence = detect_cold_front(daily_mins, threshold)
            summarizer.record_cold_front(evidence)
            logger.info(
                "%d day forecast for %s %s",
                len(daily_mins), city,
                "has a cold front (yay! 🍂🍁🎃)"
                if evidence.detected
                else "doesn't have a cold front (unfortunately)",
            )
            for drop in evidence.drops:
                logger.info(
                    "Day %d drops %d degrees (%d -> %d)",
                    drop.index, drop.drop, drop.previous, drop.current,
                )
            if evidence.detected:
                summarizer.record_dispatch(dispatcher.notify_cold_front())

            # 5. RECORDS: threshold is persisted before the alert goes out
            observed = {
                RecordKind.LOW: summary.lowest_min,
                RecordKind.HIGH: summary.lowest_max,
            }
            for tracker in trackers:
                value = observed[tracker.kind]
                if value is None:
                    logger.warning(
                        "No %s observations in forecast, skipping record check",
                        tracker.kind.value,
                    )
                    continue
                alert = tracker.evaluate(value)
                if alert is not None:
                    summarizer.record_record(alert)
                    summarizer.record_dispatch(dispatcher.notify_record(alert))

            # 6. REPORT
            summarizer.record_duration(time.monotonic() - start_time)
            summary = summarizer.finalize()
            state_repo.complete_run(
                conn,
                run_id,
                "completed",
                summary_json=format_summary_json(summary),
                samples=summary.samples,
                days=len(summary.daily_mins),
                cold_front=int(summary.cold_front),
                records=len(summary.records),
            )
            logger.info("\n%s", format_summary_text(summary))
            return summary

        except Exception as e:
            logger.exception("Check run failed")
            summarizer.record_error(str(e))
            summarizer.record_duration(time.monotonic() - start_time)
            summary = summarizer.finalize()
            state_repo.complete_run(
                conn,
                run_id,
                "failed",
                summary_json=json.dumps({"errors": summary.errors}),
                error_message=str(e),
            )
            return summary

        finally:
            conn.close()

"""Alert dispatcher: sends cold-front and record alerts, logs every outcome."""

import logging
import sqlite3

from coldfront.models.alerts import (
    AlertType,
    DispatchResult,
    DispatchStatus,
    RecordAlert,
)
from coldfront.models.common import utc_now_iso
from coldfront.notify import messages
from coldfront.notify.dry_run import DryRunNotifier
from coldfront.notify.pushbullet_client import PushbulletClient
from coldfront.storage import alert_repo

logger = logging.getLogger(__name__)


class AlertDispatcher:
    """Fire-and-forget delivery.

    A delivery failure is logged and recorded as FAILED; it is never raised
    back into the run, and it never undoes a threshold that was already
    persisted.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        notifier: DryRunNotifier | PushbulletClient,
        run_id: str,
    ):
        self.conn = conn
        self.notifier = notifier
        self.run_id = run_id

    @property
    def _success_status(self) -> DispatchStatus:
        if isinstance(self.notifier, DryRunNotifier):
            return DispatchStatus.DRY_RUN
        return DispatchStatus.SENT

    def notify_cold_front(self) -> DispatchResult:
        return self._dispatch(
            AlertType.COLD_FRONT,
            messages.COLD_FRONT_TITLE,
            messages.COLD_FRONT_BODY,
            lambda: self.notifier.push_file(
                messages.COLD_FRONT_TITLE,
                messages.COLD_FRONT_BODY,
                messages.COLD_FRONT_FILE_NAME,
                messages.COLD_FRONT_FILE_TYPE,
                messages.COLD_FRONT_FILE_URL,
            ),
        )

    def notify_record(self, alert: RecordAlert) -> DispatchResult:
        body = messages.record_body(alert)
        return self._dispatch(
            AlertType.RECORD,
            messages.RECORD_TITLE,
            body,
            lambda: self.notifier.push_note(messages.RECORD_TITLE, body),
        )

    def _dispatch(self, alert_type: AlertType, title: str, body: str, send) -> DispatchResult:
        try:
            send()
        except Exception as e:
            logger.exception("Failed to dispatch %s alert", alert_type.value)
            result = DispatchResult(
                alert_type=alert_type,
                status=DispatchStatus.FAILED,
                title=title,
                body=body,
                error_message=str(e),
                dispatched_at=utc_now_iso(),
            )
        else:
            logger.info("Dispatched %s alert: %s", alert_type.value, body)
            result = DispatchResult(
                alert_type=alert_type,
                status=self._success_status,
                title=title,
                body=body,
                error_message="",
                dispatched_at=utc_now_iso(),
            )

        alert_repo.save_alert(self.conn, self.run_id, result)
        return result

"""Dry-run notifier: logs the push instead of sending it."""

import logging

logger = logging.getLogger(__name__)


class DryRunNotifier:
    def push_note(self, title: str, body: str) -> dict:
        logger.info("DRY-RUN push note: %s | %s", title, body)
        return {"type": "note", "dry_run": True}

    def push_file(
        self,
        title: str,
        body: str,
        file_name: str,
        file_type: str,
        file_url: str,
    ) -> dict:
        logger.info("DRY-RUN push file: %s | %s (%s)", title, body, file_url)
        return {"type": "file", "dry_run": True}

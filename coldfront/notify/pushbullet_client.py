"""Pushbullet REST client for alert delivery."""

import logging
import os

import httpx

logger = logging.getLogger(__name__)

PUSHBULLET_API_BASE = "https://api.pushbullet.com"
ACCESS_TOKEN_ENV = "PUSHBULLET_ACCESS_TOKEN"


class PushbulletClientError(Exception):
    """Raised when Pushbullet returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PushbulletClient:
    def __init__(
        self,
        access_token: str | None = None,
        base_url: str = PUSHBULLET_API_BASE,
        timeout: float = 30.0,
    ):
        self.access_token = access_token or os.environ.get(ACCESS_TOKEN_ENV, "")
        if not self.access_token:
            raise PushbulletClientError(f"{ACCESS_TOKEN_ENV} not set")
        self.base_url = base_url
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Access-Token": self.access_token,
            "Content-Type": "application/json",
        }

    def push(self, payload: dict) -> dict:
        """POST a push object to /v2/pushes."""
        url = f"{self.base_url}/v2/pushes"
        try:
            resp = httpx.post(
                url, headers=self._headers(), json=payload, timeout=self.timeout
            )
        except httpx.RequestError as e:
            logger.error("Pushbullet request failed: %s", e)
            raise PushbulletClientError(f"Request failed: {e}") from e
        if resp.status_code >= 400:
            body = resp.text
            logger.error("Pushbullet API %d: %s", resp.status_code, body)
            raise PushbulletClientError(f"HTTP {resp.status_code}: {body}", resp.status_code)
        return resp.json()

    def push_note(self, title: str, body: str) -> dict:
        return self.push({"type": "note", "title": title, "body": body})

    def push_file(
        self,
        title: str,
        body: str,
        file_name: str,
        file_type: str,
        file_url: str,
    ) -> dict:
        return self.push({
            "type": "file",
            "title": title,
            "body": body,
            "file_name": file_name,
            "file_type": file_type,
            "file_url": file_url,
        })

"""
HTTP sender for the DataSet API.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests

from .constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    STATUS_BAD_PARAM,
    STATUS_SUCCESS,
)
from .errors import RequestError

logger = logging.getLogger(__name__)

Payload = Union[str, bytes, Path]


class ResponseKind(Enum):
    """How a single API response is handled."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    RETRY = "retry"


def classify_response(
    status_code: Optional[int], body: Optional[Dict[str, Any]]
) -> ResponseKind:
    """
    Decide whether a response is final.

    ``error/client/badParam`` is final regardless of the HTTP code since
    resending the same request can't fix it. ``success`` is final only on
    a 2xx response. Everything else, including unreadable bodies, is
    retried.
    """
    status = body.get("status") if isinstance(body, dict) else None
    if status == STATUS_BAD_PARAM:
        return ResponseKind.CLIENT_ERROR
    if status == STATUS_SUCCESS and status_code is not None and 200 <= status_code < 300:
        return ResponseKind.SUCCESS
    return ResponseKind.RETRY


@dataclass
class SendResult:
    """Final outcome of a request, after retries."""

    success: bool
    attempts: int
    status_code: Optional[int] = None
    reason: Optional[str] = None
    body: Optional[Dict[str, Any]] = None
    error: Optional[RequestError] = None

    @property
    def status(self) -> Optional[str]:
        return self.body.get("status") if self.body else None

    @property
    def message(self) -> Optional[str]:
        return self.body.get("message") if self.body else None


class LogSender:
    """
    Sends requests to a DataSet API endpoint.

    Each call to :meth:`send` makes up to ``max_retries + 1`` attempts.
    """

    def __init__(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ):
        """
        Initialize LogSender.

        Args:
            url: Full endpoint URL
            headers: Additional headers to send with requests
            timeout: Request timeout in seconds
            session: Custom requests.Session to use (e.g., shared by application)
            max_retries: Retries after the first attempt for transient failures
            retry_delay: Base delay between retries, grows linearly per attempt
        """
        self.url = url
        # Sent on every post; a caller-supplied session is never modified
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._owns_session = session is None
        self._session = requests.Session() if session is None else session

    def _reset_session(self) -> None:
        """Replace the internally-owned session with a fresh one."""
        self._session.close()
        self._session = requests.Session()

    def _post(self, data: Payload) -> requests.Response:
        if isinstance(data, Path):
            # Stream from disk; reopened on every attempt
            with data.open("rb") as fh:
                return self._session.post(
                    self.url, data=fh, headers=self.headers, timeout=self.timeout
                )
        if isinstance(data, str):
            data = data.encode("utf-8")
        return self._session.post(
            self.url, data=data, headers=self.headers, timeout=self.timeout
        )

    def send(self, data: Payload) -> SendResult:
        """
        POST ``data`` and retry until a final response or the retry limit.

        Args:
            data: Request body, or a path whose contents are streamed

        Returns:
            SendResult; ``error`` is set when ``success`` is False
        """
        attempts = 0
        status_code: Optional[int] = None
        reason: Optional[str] = None
        body: Optional[Dict[str, Any]] = None
        last_exc: Optional[requests.exceptions.RequestException] = None

        while True:
            attempts += 1
            try:
                response = self._post(data)
            except requests.exceptions.RequestException as exc:
                logger.debug("Request to %s failed: %s", self.url, exc)
                last_exc = exc
                status_code = reason = body = None
                if self._owns_session:
                    # Refresh internal session so future sends can recover cleanly
                    self._reset_session()
                kind = ResponseKind.RETRY
            else:
                last_exc = None
                status_code = response.status_code
                reason = response.reason
                try:
                    parsed = response.json()
                except ValueError:
                    parsed = None
                body = parsed if isinstance(parsed, dict) else None
                kind = classify_response(status_code, body)

            if kind is ResponseKind.SUCCESS:
                return SendResult(True, attempts, status_code, reason, body)
            if kind is ResponseKind.CLIENT_ERROR or attempts > self.max_retries:
                break

            logger.debug(
                "Request to %s was not successful (attempt %d, status %r), retrying",
                self.url,
                attempts,
                body.get("status") if body else status_code,
            )
            if self.retry_delay > 0:
                time.sleep(self.retry_delay * attempts)

        error = self._build_error(attempts, status_code, body, last_exc)
        return SendResult(False, attempts, status_code, reason, body, error)

    def _build_error(
        self,
        attempts: int,
        status_code: Optional[int],
        body: Optional[Dict[str, Any]],
        exc: Optional[BaseException],
    ) -> RequestError:
        status = body.get("status") if body else None
        if body and body.get("message"):
            message = str(body["message"])
        elif exc is not None:
            message = str(exc)
        elif status is not None:
            message = f"Request failed with status {status!r}"
        else:
            message = f"Request failed with HTTP status {status_code}"

        error = RequestError(message, attempts, status, status_code, body)
        error.__cause__ = exc
        return error

    def close(self) -> None:
        """Close the HTTP session."""
        if self._owns_session:
            self._session.close()

"""HTTP sender for the InfluxDB ``/write`` endpoint (v1) or ``/api/v2/write``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter

from jmeter_influx.lib.errors import ConnectionError, TransportError
from jmeter_influx.lib.resilience import with_retry
from jmeter_influx.lib.senders.base import MetricsSender
from jmeter_influx.lib.senders.registry import register_sender

logger = logging.getLogger(__name__)

__all__ = ["HttpMetricsSender", "HttpSenderConfig"]

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


@dataclass
class HttpSenderConfig:
    """Connection pool and retry settings for the HTTP sender."""

    timeout: float = 5.0
    pool_connections: int = 4
    pool_maxsize: int = 10
    max_attempts: int = 3
    backoff_seconds: float = 0.5


class _RetryableResponse(Exception):
    """Raised inside the retry loop for a retryable status code."""

    def __init__(self, response: requests.Response) -> None:
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


def _should_retry(exc: BaseException) -> bool:
    return isinstance(
        exc,
        (
            _RetryableResponse,
            requests.exceptions.Timeout,
            requests.exceptions.ConnectionError,
        ),
    )


def _create_pooled_session(config: HttpSenderConfig) -> requests.Session:
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=config.pool_connections,
        pool_maxsize=config.pool_maxsize,
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    logger.debug(
        "Created pooled session with connections=%d, maxsize=%d",
        config.pool_connections,
        config.pool_maxsize,
    )
    return session


@register_sender("http")
class HttpMetricsSender(MetricsSender):
    """Posts buffered points to InfluxDB over HTTP.

    Example:
        sender = HttpMetricsSender(token="${INFLUX_TOKEN}")
        sender.setup("http://influx:8086/write?db=jmeter")
        sender.add_metric("jmeter", ",application=shop", "meanAT=1 responseTime=12")
        sender.flush()
        sender.destroy()
    """

    def __init__(
        self,
        token: Optional[str] = None,
        config: Optional[HttpSenderConfig] = None,
    ) -> None:
        super().__init__(token)
        self.config = config or HttpSenderConfig()
        self._session: Optional[requests.Session] = None
        self._post = with_retry(
            max_attempts=self.config.max_attempts,
            backoff_seconds=self.config.backoff_seconds,
            retry_if=_should_retry,
        )(self._post_once)

    def _connect(self, endpoint: str) -> None:
        parsed = urlparse(endpoint or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConnectionError(
                f"Invalid InfluxDB URL '{endpoint}'",
                sender=self.name,
                endpoint=endpoint,
            )
        self._session = _create_pooled_session(self.config)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "text/plain; charset=utf-8"}
        if self.token:
            headers["Authorization"] = f"Token {self.token}"
        return headers

    def _post_once(self, body: str) -> requests.Response:
        assert self._session is not None
        response = self._session.post(
            self.endpoint,
            data=body.encode("utf-8"),
            headers=self._headers(),
            timeout=self.config.timeout,
        )
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise _RetryableResponse(response)
        return response

    def _send(self, body: str, count: int) -> None:
        if self._session is None:
            raise TransportError(
                "Sender used before setup",
                sender=self.name,
                endpoint=self.endpoint,
            )
        try:
            response = self._post(body)
        except _RetryableResponse as e:
            logger.error("Failed writing %d metrics: HTTP %d", count, e.response.status_code)
            raise TransportError(
                f"InfluxDB rejected {count} metrics with HTTP {e.response.status_code}",
                sender=self.name,
                endpoint=self.endpoint,
                details={"response": e.response.text[:200]},
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error("Failed writing %d metrics: %s", count, e)
            raise TransportError(
                f"Could not send {count} metrics",
                sender=self.name,
                endpoint=self.endpoint,
                cause=e,
            ) from e

        if response.status_code >= 300:
            logger.error("Failed writing %d metrics: HTTP %d", count, response.status_code)
            raise TransportError(
                f"InfluxDB rejected {count} metrics with HTTP {response.status_code}",
                sender=self.name,
                endpoint=self.endpoint,
                details={"response": response.text[:200]},
            )

    def _close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

"""AdPulse — Monitoring API Client.

Async client for the reporting endpoints used by dashboards and scripts.
Only a 502 from the gateway is retried, after a fixed delay; everything else
surfaces immediately as MonitorAPIError.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.core.logging import get_logger

logger = get_logger("monitor.client")

RETRYABLE_STATUS = 502
APPROVALS_ERROR = "Failed to load approvals"
CLICKS_ERROR = "Failed to load clicks"


class MonitorAPIError(Exception):
    """Raised when the monitoring API request ultimately fails."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


@dataclass
class ResultPage:
    """Rows of one list call plus the totals from the response headers."""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    total: Optional[int] = None
    total_pages: Optional[int] = None


def _header_int(response: httpx.Response, name: str) -> Optional[int]:
    value = response.headers.get(name)
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def _rows(payload: Any, key: str) -> List[Dict[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return payload.get(key) or []
    return []


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return default


class MonitorClient:
    """Async HTTP client for the approvals and clicks endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        attempts: int | None = None,
        retry_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.attempts = max(
            1, settings.client_retry_attempts if attempts is None else attempts
        )
        self.retry_delay = (
            settings.client_retry_delay_seconds if retry_delay is None else retry_delay
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url, timeout=30.0, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "MonitorClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    # ── Core Request Method ──

    async def _get(
        self, path: str, params: Dict[str, Any], default_error: str
    ) -> httpx.Response:
        """GET with the 502-only retry policy."""
        params = {k: v for k, v in params.items() if v is not None}
        client = await self._get_client()

        for attempt in range(1, self.attempts + 1):
            try:
                resp = await client.get(path, params=params)
            except httpx.RequestError as e:
                logger.error(f"{path} request failed: {e}")
                raise MonitorAPIError(default_error) from e

            if resp.status_code == RETRYABLE_STATUS and attempt < self.attempts:
                logger.warning(
                    f"Retrying {path} {params}, attempts left: {self.attempts - attempt}"
                )
                await asyncio.sleep(self.retry_delay)
                continue

            if resp.is_error:
                message = _error_message(resp, default_error)
                logger.error(f"{path} failed with {resp.status_code}: {message}")
                raise MonitorAPIError(message, resp.status_code)
            return resp

        raise MonitorAPIError(default_error)

    # ── Endpoints ──

    async def get_approvals(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        *,
        page: int | None = None,
        limit: int | None = None,
        fetch_all: bool = False,
    ) -> ResultPage:
        """Approvals for an inclusive ``YYYY-MM-DD`` day range."""
        params = {
            "start_date": start_date,
            "end_date": end_date,
            "page": page,
            "limit": limit,
            "fetch_all": "true" if fetch_all else None,
        }
        resp = await self._get("/approvals", params, APPROVALS_ERROR)
        return ResultPage(
            rows=_rows(resp.json(), "approvals"),
            total=_header_int(resp, "X-Total-Count"),
            total_pages=_header_int(resp, "X-Total-Pages"),
        )

    async def get_clicks(self, page: int = 1, limit: int = 50) -> ResultPage:
        """One page of click counters."""
        resp = await self._get(
            "/clicks", {"page": page, "limit": limit}, CLICKS_ERROR
        )
        return ResultPage(
            rows=_rows(resp.json(), "clicks"),
            total=_header_int(resp, "X-Total-Count"),
            total_pages=_header_int(resp, "X-Total-Pages"),
        )


class LatestResponseGuard:
    """Drops responses for superseded requests.

    Call ``issue()`` when sending a request and ``is_current(ticket)`` when
    its response arrives; only the most recently issued ticket is current.
    """

    def __init__(self) -> None:
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest

    async def run(self, coro) -> tuple[bool, Any]:
        """Await ``coro`` under a fresh ticket; report whether it is still current."""
        ticket = self.issue()
        result = await coro
        return self.is_current(ticket), result

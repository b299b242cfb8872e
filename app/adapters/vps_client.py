"""HTTP client for the VPS API backend."""

import logging
import time
from typing import Dict, Any, Optional
import httpx

from app.infra.error_handler import UpstreamError
from app.infra.metrics import upstream_requests_total, upstream_request_duration

logger = logging.getLogger(__name__)

FALLBACK_FAILURE_MESSAGE = "VPS returned success=false"


class UpstreamProxy:
    """Single chokepoint for calls to the VPS API.

    Every tool handler goes through ``call``, so transport, HTTP and
    application-level failures are normalized into ``UpstreamError`` in
    exactly one place. One attempt per call, no retries.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Backend base URL, e.g. ``https://vps.example.com``
            timeout: Request timeout in seconds; httpx's default when None
            transport: Optional httpx transport (used by tests to stub the backend)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return kwargs

    async def call(self, endpoint_path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        POST a JSON body to the backend and return the parsed response.

        Args:
            endpoint_path: Path appended to the base URL, e.g. "/run"
            body: JSON body; an empty object when None

        Returns:
            The backend's JSON object, verbatim

        Raises:
            UpstreamError: On transport failure, non-2xx status, a non-object
                body, or an explicit ``success: false``
        """
        start_time = time.time()
        try:
            payload = await self._post(endpoint_path, body if body is not None else {})
        except UpstreamError as e:
            logger.warning(
                "Backend call failed",
                extra={"endpoint": endpoint_path, "status_code": e.status_code, "error": e.message},
            )
            raise
        finally:
            upstream_request_duration.labels(endpoint=endpoint_path).observe(time.time() - start_time)

        upstream_requests_total.labels(endpoint=endpoint_path, status="success").inc()
        logger.debug(
            "Backend call succeeded",
            extra={"endpoint": endpoint_path, "latency_ms": int((time.time() - start_time) * 1000)},
        )
        return payload

    async def _post(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"

        async with httpx.AsyncClient(**self._client_kwargs()) as client:
            try:
                response = await client.post(
                    url,
                    json=body,
                    headers={"Content-Type": "application/json"},
                )
            except httpx.HTTPError as e:
                upstream_requests_total.labels(endpoint=endpoint, status="transport_error").inc()
                raise UpstreamError(f"VPS request to {url} failed: {e}", url=url) from e

            if not response.is_success:
                upstream_requests_total.labels(endpoint=endpoint, status="http_error").inc()
                raise UpstreamError(
                    f"VPS error HTTP {response.status_code}: {_read_text(response)}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                payload = response.json()
            except ValueError as e:
                upstream_requests_total.labels(endpoint=endpoint, status="app_error").inc()
                raise UpstreamError(
                    f"VPS returned invalid JSON (HTTP {response.status_code})",
                    status_code=response.status_code,
                    url=url,
                ) from e

        if not isinstance(payload, dict):
            upstream_requests_total.labels(endpoint=endpoint, status="app_error").inc()
            raise UpstreamError(
                f"VPS returned {type(payload).__name__}, expected a JSON object",
                status_code=response.status_code,
                url=url,
            )

        if payload.get("success") is False:
            upstream_requests_total.labels(endpoint=endpoint, status="app_error").inc()
            raise UpstreamError(
                str(payload.get("stderr") or FALLBACK_FAILURE_MESSAGE),
                status_code=response.status_code,
                url=url,
            )

        return payload


def _read_text(response: httpx.Response) -> str:
    """Best-effort body text; never raises."""
    try:
        return response.text
    except Exception as e:
        logger.debug(f"Could not read backend error body: {e}")
        return ""

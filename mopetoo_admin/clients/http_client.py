from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx

from mopetoo_admin.clients.auth_store import AuthStore
from mopetoo_admin.clients.config import ClientConfig
from mopetoo_admin.clients.errors import ApiError, TransportError, map_error

TRACE_HEADERS = ("X-Trace-ID", "X-Trace-Id", "X-Request-ID")


class HttpClient:
    def __init__(
        self,
        config: ClientConfig,
        auth_store: AuthStore | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self.auth_store = auth_store or AuthStore()
        self._client = client or httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.timeout_seconds,
            verify=config.verify_ssl,
        )
        self._attempts = max(0, config.retries) + 1
        self._retry_backoff_ms = max(0, config.retry_backoff_ms)
        self._auth_error_handler: Callable[[ApiError], None] | None = None

    def register_auth_error_handler(self, handler: Callable[[ApiError], None] | None) -> None:
        self._auth_error_handler = handler

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        normalized_method = method.upper()
        normalized_path = path if path.startswith("/") else f"/{path}"
        headers = {"Accept": "application/json"}
        token = self.auth_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        allow_retry = normalized_method == "GET"
        attempts = self._attempts if allow_retry else 1

        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.request(
                    normalized_method,
                    normalized_path,
                    json=body,
                    params=params,
                    headers=headers,
                )
            except httpx.TimeoutException as exc:
                if attempt >= attempts:
                    raise TransportError(
                        code="TIMEOUT_ERROR",
                        message="El servidor tardó demasiado en responder.",
                    ) from exc
                await self._backoff(attempt)
                continue
            except httpx.TransportError as exc:
                if attempt >= attempts:
                    raise TransportError(
                        code="NETWORK_ERROR",
                        message="No hay conectividad con el API de Mopetoo.",
                    ) from exc
                await self._backoff(attempt)
                continue

            if response.status_code >= 400:
                if self._is_retryable_status(response.status_code) and attempt < attempts:
                    await self._backoff(attempt)
                    continue
                error = map_error(response.status_code, self._error_payload(response), _trace_id(response))
                if error.status_code in {401, 403} and self._auth_error_handler:
                    self._auth_error_handler(error)
                raise error

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                return None

        raise TransportError(code="NETWORK_ERROR", message="Retry attempts exhausted")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _backoff(self, attempt: int) -> None:
        await asyncio.sleep((self._retry_backoff_ms * attempt) / 1000)

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return 500 <= status_code <= 599

    @staticmethod
    def _error_payload(response: httpx.Response) -> object:
        # non-JSON bodies (proxy HTML pages) stay on data only, never in the message
        try:
            payload = response.json()
        except ValueError:
            return {"body": response.text}
        return payload if payload is not None else {}


def _trace_id(response: httpx.Response) -> str | None:
    for header in TRACE_HEADERS:
        value = response.headers.get(header)
        if value:
            return value
    return None

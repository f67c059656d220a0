from __future__ import annotations

import asyncio
from urllib.parse import quote

import httpx
from loguru import logger

from app.config.settings import Settings
from app.providers import alpha_vantage, yahoo
from app.schemas.provider import Endpoint, ProviderName, ProviderResponse, ProviderStatus

_RETRY_STATUSES = {429, 502, 503, 504}
_REDACTED = "***"
_LABELS = {
    alpha_vantage.PROVIDER: "Alpha Vantage",
    yahoo.PROVIDER: "Yahoo Finance",
}
_INSPECTORS = {
    alpha_vantage.PROVIDER: alpha_vantage.inspect_payload,
    yahoo.PROVIDER: yahoo.inspect_payload,
}


class ProviderClient:
    """Issues authenticated calls to the market-data providers.

    Timeout and retry policy live here and nowhere else. Failures never raise:
    every call resolves to a ``ProviderResponse`` whose ``status`` tells the
    caller what happened, and whose ``detail`` never carries credentials.
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    @property
    def settings(self) -> Settings:
        return self._settings

    async def aclose(self) -> None:
        await self._http.aclose()

    def _credentials(self, provider: ProviderName) -> tuple[str, str | None]:
        providers = self._settings.providers
        if provider == alpha_vantage.PROVIDER:
            return providers.alpha_vantage_base_url, providers.alpha_vantage_api_key
        return providers.yahoo_base_url, providers.yahoo_api_key

    def _scrub(self, message: str | None) -> str | None:
        if not message:
            return message
        for secret in self._settings.providers.api_keys():
            message = message.replace(secret, _REDACTED)
        return message

    def _result(
        self,
        endpoint: Endpoint,
        ticker: str,
        status: ProviderStatus,
        detail: str | None = None,
        payload: dict | None = None,
    ) -> ProviderResponse:
        if status not in ("ok", "empty"):
            logger.warning(
                "{} {} for {}: {} ({})",
                _LABELS[endpoint.provider],
                endpoint.name,
                ticker,
                status,
                self._scrub(detail),
            )
        return ProviderResponse(
            provider=endpoint.provider,
            symbol=ticker,
            endpoint=endpoint.name,
            payload=payload or {},
            status=status,
            detail=self._scrub(detail),
        )

    async def fetch(self, endpoint: Endpoint, ticker: str) -> ProviderResponse:
        label = _LABELS[endpoint.provider]
        base_url, api_key = self._credentials(endpoint.provider)
        if not api_key:
            return self._result(
                endpoint, ticker, "missing_key", f"no API key configured for {label}"
            )

        url = base_url.rstrip("/") + endpoint.path.format(ticker=quote(ticker, safe=""))
        params = {
            key: value.format(ticker=ticker, api_key=api_key)
            for key, value in endpoint.query.items()
        }
        headers = {
            key: value.format(ticker=ticker, api_key=api_key)
            for key, value in endpoint.headers.items()
        }

        timeout = self._settings.providers.timeout_seconds
        try:
            response = await self._send(endpoint, ticker, url, params, headers)
        except httpx.TimeoutException:
            return self._result(
                endpoint, ticker, "timeout", f"{label} did not respond within {timeout:g}s"
            )
        except httpx.HTTPError as exc:
            return self._result(
                endpoint, ticker, "error", f"could not reach {label} ({type(exc).__name__})"
            )

        if response.status_code == 404:
            return self._result(endpoint, ticker, "empty")
        if response.status_code == 429:
            return self._result(endpoint, ticker, "rate_limited", f"{label} rate limit reached")
        if response.status_code >= 400:
            return self._result(
                endpoint, ticker, "error", f"{label} returned HTTP {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError:
            return self._result(endpoint, ticker, "error", f"{label} returned invalid JSON")
        if not isinstance(payload, dict):
            return self._result(
                endpoint, ticker, "error", f"{label} returned an unexpected response"
            )

        status, detail, payload = _INSPECTORS[endpoint.provider](payload)
        return self._result(endpoint, ticker, status, detail, payload)

    async def _send(
        self,
        endpoint: Endpoint,
        ticker: str,
        url: str,
        params: dict[str, str],
        headers: dict[str, str],
    ) -> httpx.Response:
        providers = self._settings.providers
        attempt = 0
        while True:
            try:
                response = await self._http.get(
                    url, params=params, headers=headers, timeout=providers.timeout_seconds
                )
            except httpx.TransportError as exc:
                if attempt >= providers.max_retries:
                    raise
                reason = type(exc).__name__
            else:
                if response.status_code not in _RETRY_STATUSES or attempt >= providers.max_retries:
                    return response
                reason = f"HTTP {response.status_code}"

            delay = providers.retry_backoff_seconds * 2**attempt
            logger.warning(
                "Retrying {} for {} after {} in {:.2f}s (attempt {})",
                endpoint.name,
                ticker,
                reason,
                delay,
                attempt + 1,
            )
            await asyncio.sleep(delay)
            attempt += 1

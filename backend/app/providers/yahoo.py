from __future__ import annotations

from app.schemas.provider import Endpoint, ProviderStatus

PROVIDER = "yahoo"

_QUOTE_SUMMARY_PATH = "/v11/finance/quoteSummary/{ticker}"
_CHART_PATH = "/v8/finance/chart/{ticker}"
_ENVELOPE_KEYS = ("quoteSummary", "chart")
_AUTH_HEADERS = {"X-API-KEY": "{api_key}"}


def quote_summary(*modules: str) -> Endpoint:
    return Endpoint(
        provider=PROVIDER,
        name="quoteSummary:" + ",".join(modules),
        path=_QUOTE_SUMMARY_PATH,
        query={"modules": ",".join(modules), "lang": "en", "region": "US"},
        headers=_AUTH_HEADERS,
    )


def chart(range_: str, interval: str) -> Endpoint:
    return Endpoint(
        provider=PROVIDER,
        name="chart",
        path=_CHART_PATH,
        query={"range": range_, "interval": interval, "events": "div,split"},
        headers=_AUTH_HEADERS,
    )


def inspect_payload(payload: dict) -> tuple[ProviderStatus, str | None, dict]:
    """Unwrap the ``{"<root>": {"result": [...], "error": ...}}`` envelope.

    Returns the status, a human readable detail and the first result entry.
    """
    envelope = None
    for key in _ENVELOPE_KEYS:
        if key in payload:
            envelope = payload[key]
            break
    if not isinstance(envelope, dict):
        return "error", "Yahoo Finance returned an unexpected response", {}

    error = envelope.get("error")
    if error:
        code = error.get("code") if isinstance(error, dict) else None
        if code == "Not Found":
            return "empty", None, {}
        description = error.get("description") if isinstance(error, dict) else None
        return "error", f"Yahoo Finance error: {description or code or 'unknown'}", {}

    result = envelope.get("result")
    if not result:
        return "empty", None, {}
    if not isinstance(result, list) or not isinstance(result[0], dict):
        return "error", "Yahoo Finance returned an unexpected response", {}
    return "ok", None, result[0]

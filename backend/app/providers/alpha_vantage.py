from __future__ import annotations

from app.schemas.provider import Endpoint, ProviderStatus

PROVIDER = "alpha_vantage"

_QUERY_PATH = "/query"
_NOTICE_KEYS = ("Note", "Information")
_RATE_LIMIT_PHRASES = ("rate limit", "call frequency", "requests per day", "requests per minute")


def global_quote() -> Endpoint:
    return Endpoint(
        provider=PROVIDER,
        name="GLOBAL_QUOTE",
        path=_QUERY_PATH,
        query={"function": "GLOBAL_QUOTE", "symbol": "{ticker}", "apikey": "{api_key}"},
    )


def _is_throttle_notice(notice: object) -> bool:
    if not isinstance(notice, str):
        return False
    lowered = notice.lower()
    return any(phrase in lowered for phrase in _RATE_LIMIT_PHRASES)


def inspect_payload(payload: dict) -> tuple[ProviderStatus, str | None, dict]:
    # Alpha Vantage answers throttled and rejected calls with HTTP 200.
    # "Information" also carries invalid-key and premium-only notices.
    for key in _NOTICE_KEYS:
        if key in payload:
            if _is_throttle_notice(payload[key]):
                return "rate_limited", "Alpha Vantage rate limit reached", {}
            return "error", "Alpha Vantage rejected the request", {}
    if "Error Message" in payload:
        return "error", "Alpha Vantage rejected the request", {}
    return "ok", None, payload

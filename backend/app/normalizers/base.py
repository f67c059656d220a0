from __future__ import annotations

import datetime
import math
from typing import Any

from loguru import logger

from app.config.settings import Settings
from app.providers.client import ProviderClient
from app.schemas.metrics import MetricModel, MetricResult
from app.schemas.provider import Endpoint


class MetricNotFound(Exception):
    """The provider answered, but holds no data of this category for the ticker."""


class NormalizationError(Exception):
    """The provider answered with a shape the normalizer cannot read."""


class MetricNormalizer:
    """Turns one provider payload into one category's fixed schema.

    Subclasses declare ``category`` (route segment), ``label`` (used in user
    facing messages), the upstream ``endpoint`` and ``normalize``. ``fetch``
    never raises for provider or schema problems; it reports them in the
    returned ``MetricResult`` and leaves the HTTP mapping to the router.
    """

    category: str = ""
    label: str = ""

    def endpoint(self, settings: Settings) -> Endpoint:
        raise NotImplementedError

    def normalize(self, symbol: str, payload: dict) -> MetricModel:
        raise NotImplementedError

    async def fetch(self, client: ProviderClient, symbol: str) -> MetricResult:
        response = await client.fetch(self.endpoint(client.settings), symbol)
        if response.status == "empty":
            return self.not_found(symbol)
        if not response.ok:
            return self.failure(symbol, response.detail or response.status)

        try:
            metric = self.normalize(symbol, response.payload)
        except MetricNotFound:
            return self.not_found(symbol)
        except NormalizationError as exc:
            logger.warning("Unexpected {} payload for {}: {}", self.category, symbol, exc)
            return self.failure(symbol, str(exc))

        return MetricResult(
            category=self.category,
            symbol=symbol,
            status="ok",
            data=metric.to_json_dict(),
        )

    def not_found(self, symbol: str) -> MetricResult:
        return MetricResult(
            category=self.category,
            symbol=symbol,
            status="not_found",
            message=f"No {self.label} data found for ticker {symbol}",
        )

    def failure(self, symbol: str, cause: str) -> MetricResult:
        return MetricResult(
            category=self.category,
            symbol=symbol,
            status="error",
            message=f"Error fetching {self.label} for ticker {symbol}: {cause}",
        )


def require_section(payload: dict, name: str) -> dict:
    section = payload.get(name)
    if not isinstance(section, dict):
        raise NormalizationError(f"response is missing '{name}'")
    return section


def optional_section(payload: dict, name: str) -> dict:
    section = payload.get(name)
    return section if isinstance(section, dict) else {}


def number(value: Any) -> float | None:
    """Read a provider number: plain, numeric string or a ``{"raw": ...}`` wrapper."""
    if isinstance(value, dict):
        value = value.get("raw")
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().rstrip("%").replace(",", "")
        try:
            result = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def integer(value: Any) -> int | None:
    result = number(value)
    return int(result) if result is not None else None


def text(value: Any) -> str | None:
    if isinstance(value, dict):
        value = value.get("fmt")
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def first_number(*values: Any) -> float | None:
    for value in values:
        result = number(value)
        if result is not None:
            return result
    return None


def iso_date(value: Any) -> str | None:
    """Dates arrive as ``{"raw": epoch, "fmt": "YYYY-MM-DD"}``, bare epochs or strings."""
    if isinstance(value, dict):
        formatted = value.get("fmt")
        if isinstance(formatted, str) and formatted.strip():
            return formatted.strip()
        value = value.get("raw")
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            moment = datetime.datetime.fromtimestamp(int(value), tz=datetime.UTC)
        except (OverflowError, OSError, ValueError):
            return None
        return moment.date().isoformat()
    return text(value)

from __future__ import annotations

import datetime

from app.config.settings import Settings
from app.normalizers.base import (
    MetricNormalizer,
    NormalizationError,
    integer,
    number,
    optional_section,
    require_section,
    text,
)
from app.providers import yahoo
from app.schemas.metrics import PriceHistory, PricePoint
from app.schemas.provider import Endpoint

_INTRADAY_SUFFIXES = ("m", "h")


def _series(container: dict, key: str) -> list:
    values = container.get(key)
    return values if isinstance(values, list) else []


def _at(values: list, index: int):
    return values[index] if index < len(values) else None


def _format_timestamp(ts_value: float, intraday: bool) -> str | None:
    try:
        moment = datetime.datetime.fromtimestamp(int(ts_value), tz=datetime.UTC)
    except (OverflowError, OSError, ValueError):
        return None
    if intraday:
        return moment.isoformat()
    return moment.date().isoformat()


class HistoricalNormalizer(MetricNormalizer):
    category = "historical"
    label = "historical data"

    def endpoint(self, settings: Settings) -> Endpoint:
        return yahoo.chart(settings.historical_range, settings.historical_interval)

    def normalize(self, symbol: str, payload: dict) -> PriceHistory:
        indicators = require_section(payload, "indicators")
        meta = optional_section(payload, "meta")

        quotes = indicators.get("quote")
        if not isinstance(quotes, list):
            raise NormalizationError("response is missing 'indicators.quote'")
        quote = quotes[0] if quotes and isinstance(quotes[0], dict) else {}
        adjusted = indicators.get("adjclose")
        adjclose = adjusted[0] if isinstance(adjusted, list) and adjusted else {}
        if not isinstance(adjclose, dict):
            adjclose = {}

        interval = text(meta.get("dataGranularity"))
        intraday = bool(interval) and interval.endswith(_INTRADAY_SUFFIXES)

        timestamps = _series(payload, "timestamp")
        opens = _series(quote, "open")
        highs = _series(quote, "high")
        lows = _series(quote, "low")
        closes = _series(quote, "close")
        volumes = _series(quote, "volume")
        adj_closes = _series(adjclose, "adjclose")

        points: list[PricePoint] = []
        for index, ts_value in enumerate(timestamps):
            if isinstance(ts_value, bool) or not isinstance(ts_value, (int, float)):
                continue
            close = number(_at(closes, index))
            # Yahoo pads halted sessions with null closes.
            if close is None:
                continue
            date = _format_timestamp(ts_value, intraday)
            if date is None:
                continue
            points.append(
                PricePoint(
                    date=date,
                    open=number(_at(opens, index)),
                    high=number(_at(highs, index)),
                    low=number(_at(lows, index)),
                    close=close,
                    adj_close=number(_at(adj_closes, index)),
                    volume=integer(_at(volumes, index)),
                )
            )
        points.sort(key=lambda point: point.date)

        return PriceHistory(
            symbol=symbol,
            currency=text(meta.get("currency")),
            range=text(meta.get("range")),
            interval=interval,
            points=points,
        )


historical_normalizer = HistoricalNormalizer()

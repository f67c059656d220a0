from __future__ import annotations

from app.config.settings import Settings
from app.normalizers.base import MetricNormalizer, MetricNotFound, integer, number, text
from app.providers import alpha_vantage
from app.schemas.metrics import StockQuote
from app.schemas.provider import Endpoint


class QuoteNormalizer(MetricNormalizer):
    """Latest price from Alpha Vantage's ``GLOBAL_QUOTE``.

    A quote without ``05. price`` (Alpha Vantage answers unknown symbols with
    an empty ``Global Quote`` object) is reported as not found.
    """

    category = "stock-price"
    label = "stock price"

    def endpoint(self, settings: Settings) -> Endpoint:
        return alpha_vantage.global_quote()

    def normalize(self, symbol: str, payload: dict) -> StockQuote:
        quote = payload.get("Global Quote")
        if not isinstance(quote, dict):
            raise MetricNotFound(symbol)
        price = number(quote.get("05. price"))
        if price is None:
            raise MetricNotFound(symbol)

        return StockQuote(
            symbol=symbol,
            price=price,
            last_trade_time=text(quote.get("07. latest trading day")),
            volume=integer(quote.get("06. volume")),
            open=number(quote.get("02. open")),
            high=number(quote.get("03. high")),
            low=number(quote.get("04. low")),
            previous_close=number(quote.get("08. previous close")),
            change=number(quote.get("09. change")),
            change_percent=number(quote.get("10. change percent")),
        )


quote_normalizer = QuoteNormalizer()

import re

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.normalizers.base import MetricNormalizer
from app.normalizers.company import (
    holders_normalizer,
    profile_normalizer,
    statistics_normalizer,
    sustainability_normalizer,
)
from app.normalizers.financials import balance_sheet_normalizer, income_statement_normalizer
from app.normalizers.historical import historical_normalizer
from app.normalizers.quote import quote_normalizer
from app.providers.client import ProviderClient
from app.schemas.metrics import ErrorEnvelope

router = APIRouter()
_TICKER_RE = re.compile(r"^[A-Z0-9.\-^=]{1,15}$")
_TICKER_HAS_ALNUM_RE = re.compile(r"[A-Z0-9]")

_STATUS_CODES = {
    "ok": status.HTTP_200_OK,
    "not_found": status.HTTP_404_NOT_FOUND,
    "error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class InvalidTicker(ValueError):
    pass


def get_provider_client(request: Request) -> ProviderClient:
    return request.app.state.provider_client


def _normalize_ticker(ticker: str) -> str:
    cleaned = ticker.strip().upper()
    if not cleaned:
        raise InvalidTicker("Ticker is required.")
    if not _TICKER_RE.match(cleaned) or not _TICKER_HAS_ALNUM_RE.search(cleaned):
        raise InvalidTicker(f"Invalid ticker {cleaned!r}.")
    return cleaned


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(message=message).model_dump(),
    )


async def _respond(
    normalizer: MetricNormalizer, ticker: str, client: ProviderClient
) -> JSONResponse:
    try:
        symbol = _normalize_ticker(ticker)
    except InvalidTicker as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    try:
        result = await normalizer.fetch(client, symbol)
    except Exception as exc:
        logger.exception("Unhandled error while fetching {} for {}", normalizer.category, symbol)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Error fetching {normalizer.label} for ticker {symbol}: {type(exc).__name__}",
        )

    if result.status == "ok":
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.data)
    return _error(_STATUS_CODES[result.status], result.message or "Unknown error.")


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/stock-price/{ticker}")
async def get_stock_price(
    ticker: str, client: ProviderClient = Depends(get_provider_client)
) -> JSONResponse:
    return await _respond(quote_normalizer, ticker, client)


@router.get("/statistics/{ticker}")
async def get_statistics(
    ticker: str, client: ProviderClient = Depends(get_provider_client)
) -> JSONResponse:
    return await _respond(statistics_normalizer, ticker, client)


@router.get("/profile/{ticker}")
async def get_profile(
    ticker: str, client: ProviderClient = Depends(get_provider_client)
) -> JSONResponse:
    return await _respond(profile_normalizer, ticker, client)


@router.get("/historical/{ticker}")
async def get_historical(
    ticker: str, client: ProviderClient = Depends(get_provider_client)
) -> JSONResponse:
    return await _respond(historical_normalizer, ticker, client)


@router.get("/holders/{ticker}")
async def get_holders(
    ticker: str, client: ProviderClient = Depends(get_provider_client)
) -> JSONResponse:
    return await _respond(holders_normalizer, ticker, client)


@router.get("/sustainability/{ticker}")
async def get_sustainability(
    ticker: str, client: ProviderClient = Depends(get_provider_client)
) -> JSONResponse:
    return await _respond(sustainability_normalizer, ticker, client)


@router.get("/balanceSheet/{ticker}")
async def get_balance_sheet(
    ticker: str, client: ProviderClient = Depends(get_provider_client)
) -> JSONResponse:
    return await _respond(balance_sheet_normalizer, ticker, client)


@router.get("/incomeStatement/{ticker}")
async def get_income_statement(
    ticker: str, client: ProviderClient = Depends(get_provider_client)
) -> JSONResponse:
    return await _respond(income_statement_normalizer, ticker, client)


_CATEGORIES = {
    normalizer.category
    for normalizer in (
        quote_normalizer,
        statistics_normalizer,
        profile_normalizer,
        historical_normalizer,
        holders_normalizer,
        sustainability_normalizer,
        balance_sheet_normalizer,
        income_statement_normalizer,
    )
}


@router.get("/{category}/", include_in_schema=False)
def missing_ticker(category: str) -> JSONResponse:
    if category not in _CATEGORIES:
        return _error(status.HTTP_404_NOT_FOUND, "Not Found")
    return _error(status.HTTP_400_BAD_REQUEST, "Ticker is required.")

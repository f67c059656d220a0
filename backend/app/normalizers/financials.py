from __future__ import annotations

from typing import Type

from app.config.settings import Settings
from app.normalizers.base import (
    MetricNormalizer,
    NormalizationError,
    iso_date,
    number,
    require_section,
)
from app.providers import yahoo
from app.schemas.metrics import (
    BalanceSheet,
    BalanceSheetStatement,
    IncomeStatement,
    IncomeStatementEntry,
    MetricModel,
)
from app.schemas.provider import Endpoint

# Schema field -> Yahoo statement key.
_BALANCE_SHEET_FIELDS = {
    "total_assets": "totalAssets",
    "total_liabilities": "totalLiab",
    "total_stockholder_equity": "totalStockholderEquity",
    "cash": "cash",
    "short_term_investments": "shortTermInvestments",
    "net_receivables": "netReceivables",
    "inventory": "inventory",
    "total_current_assets": "totalCurrentAssets",
    "total_current_liabilities": "totalCurrentLiabilities",
    "long_term_debt": "longTermDebt",
    "property_plant_equipment": "propertyPlantEquipment",
    "good_will": "goodWill",
}

_INCOME_STATEMENT_FIELDS = {
    "total_revenue": "totalRevenue",
    "cost_of_revenue": "costOfRevenue",
    "gross_profit": "grossProfit",
    "research_development": "researchDevelopment",
    "selling_general_administrative": "sellingGeneralAdministrative",
    "operating_income": "operatingIncome",
    "interest_expense": "interestExpense",
    "income_before_tax": "incomeBeforeTax",
    "income_tax_expense": "incomeTaxExpense",
    "net_income": "netIncome",
    "ebit": "ebit",
}


def _statements(
    payload: dict,
    module: str,
    list_key: str,
    model: Type[MetricModel],
    fields: dict[str, str],
) -> list:
    section = require_section(payload, module)
    entries = section.get(list_key)
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise NormalizationError(f"'{module}.{list_key}' is not a list")

    statements = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        values = {field: number(entry.get(key)) for field, key in fields.items()}
        statements.append(model(end_date=iso_date(entry.get("endDate")), **values))
    # Newest period first; undated periods last.
    dated = sorted(
        (statement for statement in statements if statement.end_date),
        key=lambda statement: statement.end_date,
        reverse=True,
    )
    undated = [statement for statement in statements if not statement.end_date]
    return dated + undated


class BalanceSheetNormalizer(MetricNormalizer):
    category = "balanceSheet"
    label = "balance sheet data"

    def endpoint(self, settings: Settings) -> Endpoint:
        return yahoo.quote_summary("balanceSheetHistory")

    def normalize(self, symbol: str, payload: dict) -> BalanceSheet:
        statements = _statements(
            payload,
            "balanceSheetHistory",
            "balanceSheetStatements",
            BalanceSheetStatement,
            _BALANCE_SHEET_FIELDS,
        )
        return BalanceSheet(symbol=symbol, statements=statements)


class IncomeStatementNormalizer(MetricNormalizer):
    category = "incomeStatement"
    label = "income statement data"

    def endpoint(self, settings: Settings) -> Endpoint:
        return yahoo.quote_summary("incomeStatementHistory")

    def normalize(self, symbol: str, payload: dict) -> IncomeStatement:
        statements = _statements(
            payload,
            "incomeStatementHistory",
            "incomeStatementHistory",
            IncomeStatementEntry,
            _INCOME_STATEMENT_FIELDS,
        )
        return IncomeStatement(symbol=symbol, statements=statements)


balance_sheet_normalizer = BalanceSheetNormalizer()
income_statement_normalizer = IncomeStatementNormalizer()

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MetricModel(BaseModel):
    """Base for every normalized payload sent to the dashboard.

    Fields serialize in camelCase and are always present: an absent scalar is
    ``null`` and an absent series is ``[]``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ErrorEnvelope(BaseModel):
    message: str


class MetricResult(BaseModel):
    category: str
    symbol: str
    status: Literal["ok", "not_found", "error"]
    data: Optional[dict] = None
    message: Optional[str] = None


class StockQuote(MetricModel):
    symbol: str
    price: Optional[float] = None
    last_trade_time: Optional[str] = None
    volume: Optional[int] = None
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    previous_close: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None


class CompanyOfficer(MetricModel):
    name: Optional[str] = None
    title: Optional[str] = None
    age: Optional[int] = None
    total_pay: Optional[float] = None


class CompanyProfile(MetricModel):
    symbol: str
    name: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    employees: Optional[int] = None
    summary: Optional[str] = None
    officers: list[CompanyOfficer] = Field(default_factory=list)


class KeyStatistics(MetricModel):
    symbol: str
    currency: Optional[str] = None
    market_cap: Optional[float] = None
    enterprise_value: Optional[float] = None
    trailing_pe: Optional[float] = Field(default=None, alias="trailingPE")
    forward_pe: Optional[float] = Field(default=None, alias="forwardPE")
    peg_ratio: Optional[float] = None
    price_to_book: Optional[float] = None
    beta: Optional[float] = None
    dividend_yield: Optional[float] = None
    profit_margins: Optional[float] = None
    return_on_equity: Optional[float] = None
    fifty_two_week_high: Optional[float] = None
    fifty_two_week_low: Optional[float] = None
    shares_outstanding: Optional[float] = None
    current_price: Optional[float] = None
    target_mean_price: Optional[float] = None
    recommendation_key: Optional[str] = None
    recommendation_mean: Optional[float] = None
    number_of_analyst_opinions: Optional[int] = None


class PricePoint(MetricModel):
    date: str
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: float
    adj_close: Optional[float] = None
    volume: Optional[int] = None


class PriceHistory(MetricModel):
    symbol: str
    currency: Optional[str] = None
    range: Optional[str] = None
    interval: Optional[str] = None
    points: list[PricePoint] = Field(default_factory=list)


class InstitutionalHolder(MetricModel):
    organization: Optional[str] = None
    pct_held: Optional[float] = None
    position: Optional[float] = None
    value: Optional[float] = None
    report_date: Optional[str] = None


class HoldersBreakdown(MetricModel):
    symbol: str
    insiders_percent_held: Optional[float] = None
    institutions_percent_held: Optional[float] = None
    institutions_float_percent_held: Optional[float] = None
    institutions_count: Optional[int] = None
    top_institutions: list[InstitutionalHolder] = Field(default_factory=list)


class Sustainability(MetricModel):
    symbol: str
    total_esg: Optional[float] = None
    environment_score: Optional[float] = None
    social_score: Optional[float] = None
    governance_score: Optional[float] = None
    esg_performance: Optional[str] = None
    percentile: Optional[float] = None
    peer_group: Optional[str] = None
    highest_controversy: Optional[float] = None
    rating_year: Optional[int] = None
    rating_month: Optional[int] = None


class BalanceSheetStatement(MetricModel):
    end_date: Optional[str] = None
    total_assets: Optional[float] = None
    total_liabilities: Optional[float] = None
    total_stockholder_equity: Optional[float] = None
    cash: Optional[float] = None
    short_term_investments: Optional[float] = None
    net_receivables: Optional[float] = None
    inventory: Optional[float] = None
    total_current_assets: Optional[float] = None
    total_current_liabilities: Optional[float] = None
    long_term_debt: Optional[float] = None
    property_plant_equipment: Optional[float] = None
    good_will: Optional[float] = None


class BalanceSheet(MetricModel):
    symbol: str
    statements: list[BalanceSheetStatement] = Field(default_factory=list)


class IncomeStatementEntry(MetricModel):
    end_date: Optional[str] = None
    total_revenue: Optional[float] = None
    cost_of_revenue: Optional[float] = None
    gross_profit: Optional[float] = None
    research_development: Optional[float] = None
    selling_general_administrative: Optional[float] = None
    operating_income: Optional[float] = None
    interest_expense: Optional[float] = None
    income_before_tax: Optional[float] = None
    income_tax_expense: Optional[float] = None
    net_income: Optional[float] = None
    ebit: Optional[float] = None


class IncomeStatement(MetricModel):
    symbol: str
    statements: list[IncomeStatementEntry] = Field(default_factory=list)

from __future__ import annotations

from app.config.settings import Settings
from app.normalizers.base import (
    MetricNormalizer,
    first_number,
    integer,
    iso_date,
    number,
    optional_section,
    require_section,
    text,
)
from app.providers import yahoo
from app.schemas.metrics import (
    CompanyOfficer,
    CompanyProfile,
    HoldersBreakdown,
    InstitutionalHolder,
    KeyStatistics,
    Sustainability,
)
from app.schemas.provider import Endpoint


class ProfileNormalizer(MetricNormalizer):
    category = "profile"
    label = "profile data"

    def endpoint(self, settings: Settings) -> Endpoint:
        return yahoo.quote_summary("assetProfile", "price")

    def normalize(self, symbol: str, payload: dict) -> CompanyProfile:
        profile = require_section(payload, "assetProfile")
        price = optional_section(payload, "price")

        officers = []
        for officer in profile.get("companyOfficers") or []:
            if not isinstance(officer, dict):
                continue
            officers.append(
                CompanyOfficer(
                    name=text(officer.get("name")),
                    title=text(officer.get("title")),
                    age=integer(officer.get("age")),
                    total_pay=number(officer.get("totalPay")),
                )
            )

        return CompanyProfile(
            symbol=symbol,
            name=text(price.get("longName")) or text(price.get("shortName")),
            sector=text(profile.get("sector")),
            industry=text(profile.get("industry")),
            website=text(profile.get("website")),
            phone=text(profile.get("phone")),
            address=text(profile.get("address1")),
            city=text(profile.get("city")),
            state=text(profile.get("state")),
            country=text(profile.get("country")),
            employees=integer(profile.get("fullTimeEmployees")),
            summary=text(profile.get("longBusinessSummary")),
            officers=officers,
        )


class StatisticsNormalizer(MetricNormalizer):
    """Valuation ratios and analyst ratings, merged from three summary modules."""

    category = "statistics"
    label = "statistics"

    def endpoint(self, settings: Settings) -> Endpoint:
        return yahoo.quote_summary("defaultKeyStatistics", "financialData", "summaryDetail")

    def normalize(self, symbol: str, payload: dict) -> KeyStatistics:
        stats = require_section(payload, "defaultKeyStatistics")
        financial = optional_section(payload, "financialData")
        detail = optional_section(payload, "summaryDetail")

        return KeyStatistics(
            symbol=symbol,
            currency=text(detail.get("currency")) or text(financial.get("financialCurrency")),
            market_cap=number(detail.get("marketCap")),
            enterprise_value=number(stats.get("enterpriseValue")),
            trailing_pe=number(detail.get("trailingPE")),
            forward_pe=first_number(detail.get("forwardPE"), stats.get("forwardPE")),
            peg_ratio=number(stats.get("pegRatio")),
            price_to_book=number(stats.get("priceToBook")),
            beta=first_number(detail.get("beta"), stats.get("beta")),
            dividend_yield=number(detail.get("dividendYield")),
            profit_margins=first_number(stats.get("profitMargins"), financial.get("profitMargins")),
            return_on_equity=number(financial.get("returnOnEquity")),
            fifty_two_week_high=number(detail.get("fiftyTwoWeekHigh")),
            fifty_two_week_low=number(detail.get("fiftyTwoWeekLow")),
            shares_outstanding=number(stats.get("sharesOutstanding")),
            current_price=number(financial.get("currentPrice")),
            target_mean_price=number(financial.get("targetMeanPrice")),
            recommendation_key=text(financial.get("recommendationKey")),
            recommendation_mean=number(financial.get("recommendationMean")),
            number_of_analyst_opinions=integer(financial.get("numberOfAnalystOpinions")),
        )


class HoldersNormalizer(MetricNormalizer):
    category = "holders"
    label = "holders data"

    def endpoint(self, settings: Settings) -> Endpoint:
        return yahoo.quote_summary("majorHoldersBreakdown", "institutionOwnership")

    def normalize(self, symbol: str, payload: dict) -> HoldersBreakdown:
        breakdown = require_section(payload, "majorHoldersBreakdown")
        ownership = optional_section(payload, "institutionOwnership")

        holders = []
        for entry in ownership.get("ownershipList") or []:
            if not isinstance(entry, dict):
                continue
            holders.append(
                InstitutionalHolder(
                    organization=text(entry.get("organization")),
                    pct_held=number(entry.get("pctHeld")),
                    position=number(entry.get("position")),
                    value=number(entry.get("value")),
                    report_date=iso_date(entry.get("reportDate")),
                )
            )
        # Largest positions first; unknown positions last.
        holders.sort(
            key=lambda holder: (
                holder.position is None,
                -(holder.position or 0.0),
                holder.organization or "",
            )
        )

        return HoldersBreakdown(
            symbol=symbol,
            insiders_percent_held=number(breakdown.get("insidersPercentHeld")),
            institutions_percent_held=number(breakdown.get("institutionsPercentHeld")),
            institutions_float_percent_held=number(breakdown.get("institutionsFloatPercentHeld")),
            institutions_count=integer(breakdown.get("institutionsCount")),
            top_institutions=holders,
        )


class SustainabilityNormalizer(MetricNormalizer):
    category = "sustainability"
    label = "sustainability data"

    def endpoint(self, settings: Settings) -> Endpoint:
        return yahoo.quote_summary("esgScores")

    def normalize(self, symbol: str, payload: dict) -> Sustainability:
        scores = require_section(payload, "esgScores")
        return Sustainability(
            symbol=symbol,
            total_esg=number(scores.get("totalEsg")),
            environment_score=number(scores.get("environmentScore")),
            social_score=number(scores.get("socialScore")),
            governance_score=number(scores.get("governanceScore")),
            esg_performance=text(scores.get("esgPerformance")),
            percentile=number(scores.get("percentile")),
            peer_group=text(scores.get("peerGroup")),
            highest_controversy=number(scores.get("highestControversy")),
            rating_year=integer(scores.get("ratingYear")),
            rating_month=integer(scores.get("ratingMonth")),
        )


profile_normalizer = ProfileNormalizer()
statistics_normalizer = StatisticsNormalizer()
holders_normalizer = HoldersNormalizer()
sustainability_normalizer = SustainabilityNormalizer()

import httpx

from app.config.settings import ProviderSettings, Settings

ALPHA_VANTAGE_KEY = "av-secret-key"
YAHOO_KEY = "yh-secret-key"

GLOBAL_QUOTE = {
    "Global Quote": {
        "01. symbol": "MSFT",
        "02. open": "415.0000",
        "03. high": "420.1000",
        "04. low": "414.2000",
        "05. price": "418.5600",
        "06. volume": "21566100",
        "07. latest trading day": "2024-05-03",
        "08. previous close": "414.7900",
        "09. change": "3.7700",
        "10. change percent": "0.9089%",
    }
}

MODULES = {
    "assetProfile": {
        "address1": "One Microsoft Way",
        "city": "Redmond",
        "state": "WA",
        "country": "United States",
        "phone": "425 882 8080",
        "website": "https://www.microsoft.com",
        "industry": "Software - Infrastructure",
        "sector": "Technology",
        "longBusinessSummary": "Microsoft develops and supports software.",
        "fullTimeEmployees": 221000,
        "companyOfficers": [
            {
                "name": "Mr. Satya Nadella",
                "title": "Chairman & CEO",
                "age": 56,
                "totalPay": {"raw": 9276400, "fmt": "9.28M"},
            },
            {"name": "Ms. Amy Hood", "title": "CFO", "totalPay": {}},
        ],
    },
    "price": {"longName": "Microsoft Corporation", "shortName": "Microsoft"},
    "defaultKeyStatistics": {
        "enterpriseValue": {"raw": 3100000000000, "fmt": "3.1T"},
        "pegRatio": {"raw": 2.1, "fmt": "2.10"},
        "priceToBook": {"raw": 12.5, "fmt": "12.50"},
        "sharesOutstanding": {"raw": 7430000000, "fmt": "7.43B"},
        "profitMargins": {"raw": 0.36, "fmt": "36.00%"},
        "beta": {},
    },
    "financialData": {
        "currentPrice": {"raw": 418.56, "fmt": "418.56"},
        "targetMeanPrice": {"raw": 480.0, "fmt": "480.00"},
        "recommendationKey": "buy",
        "recommendationMean": {"raw": 1.8, "fmt": "1.80"},
        "numberOfAnalystOpinions": {"raw": 45, "fmt": "45"},
        "returnOnEquity": {"raw": 0.38, "fmt": "38.00%"},
        "financialCurrency": "USD",
    },
    "summaryDetail": {
        "marketCap": {"raw": 3110000000000, "fmt": "3.11T"},
        "trailingPE": {"raw": 36.2, "fmt": "36.20"},
        "forwardPE": {"raw": 31.0, "fmt": "31.00"},
        "beta": {"raw": 0.89, "fmt": "0.89"},
        "dividendYield": {"raw": 0.0072, "fmt": "0.72%"},
        "fiftyTwoWeekHigh": {"raw": 430.82, "fmt": "430.82"},
        "fiftyTwoWeekLow": {"raw": 309.45, "fmt": "309.45"},
        "currency": "USD",
    },
    "majorHoldersBreakdown": {
        "insidersPercentHeld": {"raw": 0.0005, "fmt": "0.05%"},
        "institutionsPercentHeld": {"raw": 0.73, "fmt": "73.00%"},
        "institutionsFloatPercentHeld": {"raw": 0.73, "fmt": "73.00%"},
        "institutionsCount": {"raw": 6500, "fmt": "6.5k"},
    },
    "institutionOwnership": {
        "ownershipList": [
            {
                "organization": "Blackrock Inc.",
                "pctHeld": {"raw": 0.072, "fmt": "7.20%"},
                "position": {"raw": 535000000, "fmt": "535M"},
                "value": {"raw": 220000000000, "fmt": "220B"},
                "reportDate": {"raw": 1703980800, "fmt": "2023-12-31"},
            },
            {
                "organization": "Vanguard Group Inc",
                "pctHeld": {"raw": 0.089, "fmt": "8.90%"},
                "position": {"raw": 660000000, "fmt": "660M"},
                "value": {"raw": 270000000000, "fmt": "270B"},
                "reportDate": {"raw": 1703980800},
            },
        ]
    },
    "esgScores": {
        "totalEsg": {"raw": 15.2, "fmt": "15.2"},
        "environmentScore": {"raw": 1.4, "fmt": "1.4"},
        "socialScore": {"raw": 8.1, "fmt": "8.1"},
        "governanceScore": {"raw": 5.7, "fmt": "5.7"},
        "esgPerformance": "AVG_PERF",
        "percentile": {"raw": 12.3, "fmt": "12.3"},
        "peerGroup": "Software & Services",
        "highestControversy": 3,
        "ratingYear": 2024,
        "ratingMonth": 4,
    },
    "balanceSheetHistory": {
        "balanceSheetStatements": [
            {
                "endDate": {"raw": 1656547200, "fmt": "2022-06-30"},
                "totalAssets": {"raw": 364840000000},
                "totalLiab": {"raw": 198298000000},
            },
            {
                "endDate": {"raw": 1688083200, "fmt": "2023-06-30"},
                "totalAssets": {"raw": 411976000000},
                "totalLiab": {"raw": 205753000000},
                "totalStockholderEquity": {"raw": 206223000000},
                "cash": {"raw": 34704000000},
            },
        ]
    },
    "incomeStatementHistory": {
        "incomeStatementHistory": [
            {
                "endDate": {"raw": 1656547200},
                "totalRevenue": {"raw": 198270000000},
                "netIncome": {"raw": 72738000000},
            },
            {
                "endDate": {"raw": 1688083200, "fmt": "2023-06-30"},
                "totalRevenue": {"raw": 211915000000},
                "netIncome": {"raw": 72361000000},
                "ebit": {"raw": 88523000000},
            },
        ]
    },
}

CHART = {
    "chart": {
        "result": [
            {
                "meta": {
                    "currency": "USD",
                    "symbol": "MSFT",
                    "range": "1y",
                    "dataGranularity": "1d",
                },
                "timestamp": [1714656600, 1714570200, 1714743000],
                "indicators": {
                    "quote": [
                        {
                            "open": [409.0, 405.5, 415.0],
                            "high": [413.2, 411.0, 420.1],
                            "low": [408.1, 404.9, 414.2],
                            "close": [412.0, 410.0, None],
                            "volume": [20000000, 18000000, None],
                        }
                    ],
                    "adjclose": [{"adjclose": [411.2, 409.3, None]}],
                },
            }
        ],
        "error": None,
    }
}

NOT_FOUND_SUMMARY = {
    "quoteSummary": {
        "result": None,
        "error": {"code": "Not Found", "description": "Quote not found for ticker symbol: ZZZZ"},
    }
}


def make_settings(**provider_overrides) -> Settings:
    values = {
        "alpha_vantage_api_key": ALPHA_VANTAGE_KEY,
        "alpha_vantage_base_url": "https://av.test",
        "yahoo_api_key": YAHOO_KEY,
        "yahoo_base_url": "https://yahoo.test",
        "timeout_seconds": 0.5,
    }
    values.update(provider_overrides)
    return Settings(providers=ProviderSettings(**values))


def quote_summary_response(request: httpx.Request) -> httpx.Response:
    modules = request.url.params.get("modules", "").split(",")
    result = {module: MODULES[module] for module in modules if module in MODULES}
    return httpx.Response(200, json={"quoteSummary": {"result": [result], "error": None}})


def default_response(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/query":
        return httpx.Response(200, json=GLOBAL_QUOTE)
    if request.url.path.startswith("/v8/finance/chart/"):
        return httpx.Response(200, json=CHART)
    if request.url.path.startswith("/v11/finance/quoteSummary/"):
        return quote_summary_response(request)
    return httpx.Response(404)


class FakeUpstream:
    """Records every upstream request and answers through ``handler``."""

    def __init__(self, handler=default_response) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

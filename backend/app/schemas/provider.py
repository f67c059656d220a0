from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ProviderName = Literal["alpha_vantage", "yahoo"]
ProviderStatus = Literal["ok", "empty", "error", "rate_limited", "timeout", "missing_key"]


class Endpoint(BaseModel):
    """Upstream URL template.

    ``path``, ``query`` values and ``headers`` values may reference the
    ``{ticker}`` and ``{api_key}`` placeholders; the provider client fills
    them in at request time.
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderName
    name: str
    path: str
    query: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)


class ProviderResponse(BaseModel):
    provider: ProviderName
    symbol: str
    endpoint: str
    payload: dict = Field(default_factory=dict)
    status: ProviderStatus = "ok"
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

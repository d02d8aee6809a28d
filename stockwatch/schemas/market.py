from pydantic import BaseModel, Field


class LatestQuote(BaseModel):
    symbol: str
    open: float
    close: float
    percentage_change: float


class MarketSnapshot(BaseModel):
    symbol: str
    open: float
    close: float
    percentage_change: float
    recent_ema: list[float] = Field(default_factory=list)
    updated_at: int

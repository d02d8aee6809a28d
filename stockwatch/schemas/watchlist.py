from pydantic import BaseModel, field_validator


class WatchlistSymbolRequest(BaseModel):
    symbol: str

    @field_validator("symbol")
    @classmethod
    def strip_symbol(cls, value: str) -> str:
        return value.strip()


class WatchlistActionResult(BaseModel):
    ok: bool
    message: str


class WatchlistRow(BaseModel):
    symbol: str
    open: str
    close: str
    change: str
    ema: str


class RefreshReport(BaseModel):
    messages: list[str]

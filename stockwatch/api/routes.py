from fastapi import APIRouter, HTTPException, Request

from stockwatch.errors import (
    AlreadyTrackedError,
    FetchError,
    InsufficientHistoryError,
    InvalidDataError,
    InvalidSymbolError,
    NotTrackedError,
    WatchlistError,
)
from stockwatch.schemas.watchlist import (
    RefreshReport,
    WatchlistActionResult,
    WatchlistRow,
    WatchlistSymbolRequest,
)

router = APIRouter()

_STATUS_BY_ERROR = (
    (InvalidSymbolError, 400),
    (NotTrackedError, 404),
    (AlreadyTrackedError, 409),
    (InsufficientHistoryError, 422),
    (InvalidDataError, 422),
    (FetchError, 502),
)


def _to_http_error(exc: WatchlistError) -> HTTPException:
    status_code = 500
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    return HTTPException(status_code=status_code, detail={'reason': exc.code, 'message': str(exc)})


@router.get('/watchlist', response_model=list[WatchlistRow])
def list_watchlist(request: Request):
    return request.app.state.watchlist_store.read_all()


@router.post('/watchlist', response_model=WatchlistActionResult)
def add_symbol(req: WatchlistSymbolRequest, request: Request):
    store = request.app.state.watchlist_store
    try:
        message = store.add(req.symbol)
    except WatchlistError as exc:
        raise _to_http_error(exc) from exc
    return WatchlistActionResult(ok=True, message=message)


@router.delete('/watchlist/{symbol}', response_model=WatchlistActionResult)
def remove_symbol(symbol: str, request: Request):
    store = request.app.state.watchlist_store
    try:
        message = store.remove(symbol)
    except WatchlistError as exc:
        raise _to_http_error(exc) from exc
    return WatchlistActionResult(ok=True, message=message)


@router.post('/watchlist/refresh', response_model=RefreshReport)
def refresh_watchlist(request: Request):
    return RefreshReport(messages=request.app.state.watchlist_store.refresh())


@router.get('/metrics/watchlist')
def watchlist_metrics(request: Request):
    store = request.app.state.watchlist_store
    metrics = store.metrics()
    metrics.update(store.orchestrator.metrics())
    return metrics

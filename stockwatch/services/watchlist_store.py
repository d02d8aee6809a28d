from __future__ import annotations

import threading

from stockwatch.errors import (
    AlreadyTrackedError,
    InvalidSymbolError,
    NotTrackedError,
    TaskFailureError,
    WatchlistError,
)
from stockwatch.schemas.market import MarketSnapshot
from stockwatch.schemas.watchlist import WatchlistRow
from stockwatch.services.formatting import to_row
from stockwatch.services.refresh import RefreshOrchestrator
from stockwatch.services.snapshot_pipeline import SnapshotPipeline


def normalize_symbol(symbol: str) -> str:
    value = str(symbol).strip()
    if not value:
        raise InvalidSymbolError("Cannot add an empty stock symbol.")
    return value


class WatchlistStore:
    """Tracked symbols plus their latest snapshots, guarded by one lock.

    Network I/O always happens outside the lock; the lock only covers the
    structural mutations (add-insert, remove, refresh write-back) and reads.
    """

    def __init__(self, pipeline: SnapshotPipeline, orchestrator: RefreshOrchestrator | None = None) -> None:
        self._lock = threading.Lock()
        # dict keys double as an insertion-ordered set
        self._symbols: dict[str, None] = {}
        self._snapshots: dict[str, MarketSnapshot] = {}
        self.pipeline = pipeline
        self.orchestrator = orchestrator or RefreshOrchestrator(pipeline)

        self.adds = 0
        self.add_failures = 0
        self.removes = 0
        self.write_backs = 0

    def add(self, symbol: str) -> str:
        symbol = normalize_symbol(symbol)
        with self._lock:
            if symbol in self._symbols:
                raise AlreadyTrackedError(f"{symbol} is already in your watchlist.", symbol=symbol)

        try:
            snapshot = self.pipeline.build(symbol)
        except WatchlistError as exc:
            self.add_failures += 1
            print(f"[WATCHLIST][add_failed] symbol={symbol} code={exc.code} error={exc}", flush=True)
            raise
        except Exception as exc:
            self.add_failures += 1
            print(f"[WATCHLIST][add_failed] symbol={symbol} code=TASK_FAILURE error={exc!r}", flush=True)
            raise TaskFailureError(f"Failed to fetch data for '{symbol}': {exc}", symbol=symbol) from exc

        with self._lock:
            # another add for the same symbol may have finished while we were fetching
            if symbol in self._symbols:
                raise AlreadyTrackedError(f"{symbol} is already in your watchlist.", symbol=symbol)
            self._symbols[symbol] = None
            self._snapshots[symbol] = snapshot
            self.adds += 1

        print(f"[WATCHLIST][add] symbol={symbol}", flush=True)
        return f"Added {symbol} to watchlist."

    def remove(self, symbol: str) -> str:
        symbol = str(symbol).strip()
        with self._lock:
            if symbol not in self._symbols:
                raise NotTrackedError(f"{symbol} is not in your watchlist.", symbol=symbol)
            del self._symbols[symbol]
            self._snapshots.pop(symbol, None)
            self.removes += 1

        print(f"[WATCHLIST][remove] symbol={symbol}", flush=True)
        return f"Removed {symbol} from watchlist."

    def _write_back(self, symbol: str, snapshot: MarketSnapshot) -> bool:
        with self._lock:
            if symbol not in self._symbols:
                return False
            self._snapshots[symbol] = snapshot
            self.write_backs += 1
            return True

    def refresh(self) -> list[str]:
        symbols = self.tracked()
        return self.orchestrator.run(symbols, self._write_back)

    def tracked(self) -> list[str]:
        with self._lock:
            return list(self._symbols)

    def get(self, symbol: str) -> MarketSnapshot | None:
        with self._lock:
            snapshot = self._snapshots.get(symbol)
            return snapshot.model_copy(deep=True) if snapshot is not None else None

    def read_all(self) -> list[WatchlistRow]:
        with self._lock:
            snapshots = list(self._snapshots.values())
        return [to_row(snapshot) for snapshot in snapshots]

    def metrics(self) -> dict[str, int]:
        with self._lock:
            tracked = len(self._symbols)
            cached = len(self._snapshots)
        return {
            "tracked_symbols": tracked,
            "cached_snapshots": cached,
            "adds": self.adds,
            "add_failures": self.add_failures,
            "removes": self.removes,
            "write_backs": self.write_backs,
        }

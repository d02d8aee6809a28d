from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Callable

from stockwatch.errors import TaskFailureError, WatchlistError
from stockwatch.schemas.market import MarketSnapshot
from stockwatch.services.snapshot_pipeline import SnapshotPipeline

WriteBack = Callable[[str, MarketSnapshot], bool]


class RefreshOrchestrator:
    """Fan out one snapshot pipeline per symbol and collect every outcome.

    A failing symbol never cancels its siblings and never touches the cache.
    Successful snapshots are handed to ``write_back`` from the collecting
    thread, one call per symbol, so workers never mutate shared state.
    """

    def __init__(
        self,
        pipeline: SnapshotPipeline,
        *,
        max_workers: int | None = None,
        timeout_sec: float | None = None,
    ) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be positive")
        if timeout_sec is not None and timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")

        self.pipeline = pipeline
        self.max_workers = max_workers
        self.timeout_sec = timeout_sec

        self.refresh_runs = 0
        self.last_refresh_target = 0
        self.last_refresh_updated = 0
        self.last_refresh_failed = 0
        self.last_refresh_skipped = 0

    def _worker_count(self, target: int) -> int:
        if self.max_workers is None:
            return target
        return min(self.max_workers, target)

    @staticmethod
    def _failure_message(symbol: str, exc: WatchlistError) -> str:
        print(f"[REFRESH][symbol_failed] symbol={symbol} code={exc.code} error={exc}", flush=True)
        return f"Failed to update data for {symbol}: {exc}"

    def _resolve(self, symbol: str, future: Future, write_back: WriteBack) -> tuple[str, str]:
        try:
            snapshot = future.result()
        except WatchlistError as exc:
            return "failed", self._failure_message(symbol, exc)
        except Exception as exc:
            failure = TaskFailureError(f"unexpected error: {exc!r}", symbol=symbol)
            return "failed", self._failure_message(symbol, failure)

        if not write_back(symbol, snapshot):
            return "skipped", f"Skipped {symbol}: removed during refresh."
        return "updated", f"Updated data for {symbol}."

    def run(self, symbols: list[str], write_back: WriteBack) -> list[str]:
        self.refresh_runs += 1
        counts = {"updated": 0, "failed": 0, "skipped": 0}
        messages: list[str] = []

        if symbols:
            executor = ThreadPoolExecutor(
                max_workers=self._worker_count(len(symbols)),
                thread_name_prefix="watchlist-refresh",
            )
            futures = {executor.submit(self.pipeline.build, symbol): symbol for symbol in symbols}
            resolved: set[Future] = set()
            try:
                for future in as_completed(futures, timeout=self.timeout_sec):
                    resolved.add(future)
                    outcome, message = self._resolve(futures[future], future, write_back)
                    counts[outcome] += 1
                    messages.append(message)
            except FuturesTimeoutError:
                for future, symbol in futures.items():
                    if future in resolved:
                        continue
                    if future.done():
                        outcome, message = self._resolve(symbol, future, write_back)
                    else:
                        # late results are dropped; the worker thread cannot be interrupted
                        future.cancel()
                        failure = TaskFailureError(
                            f"timed out after {self.timeout_sec}s", symbol=symbol
                        )
                        outcome, message = "failed", self._failure_message(symbol, failure)
                    counts[outcome] += 1
                    messages.append(message)
            finally:
                executor.shutdown(wait=self.timeout_sec is None, cancel_futures=True)

        self.last_refresh_target = len(symbols)
        self.last_refresh_updated = counts["updated"]
        self.last_refresh_failed = counts["failed"]
        self.last_refresh_skipped = counts["skipped"]
        print(
            "[REFRESH][batch_resolve] "
            f"target_count={len(symbols)} updated_count={counts['updated']} "
            f"failed_count={counts['failed']} skipped_count={counts['skipped']}",
            flush=True,
        )
        return messages

    def metrics(self) -> dict[str, int]:
        return {
            "refresh_runs": self.refresh_runs,
            "last_refresh_target": self.last_refresh_target,
            "last_refresh_updated": self.last_refresh_updated,
            "last_refresh_failed": self.last_refresh_failed,
            "last_refresh_skipped": self.last_refresh_skipped,
        }

"""Training utilities for the recommender selector."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Sequence

from loguru import logger

from ..entities import Order, OrderItem
from .selector import RecommenderSelector

TrainingData = tuple[Sequence[OrderItem], Sequence[Order]]


@dataclass(slots=True)
class TrainingReport:
    """Summary of one training cycle."""

    algorithm: str
    orders: int
    order_items: int
    duration_seconds: float


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def filter_before(
    order_items: Sequence[OrderItem],
    orders: Sequence[Order],
    max_time: datetime | None,
) -> TrainingData:
    """Keep only orders placed at or before ``max_time`` and their items.

    Naive timestamps are treated as UTC.
    """
    if max_time is None:
        return list(order_items), list(orders)
    cutoff = _as_utc(max_time)
    kept_orders = [order for order in orders if _as_utc(order.time) <= cutoff]
    kept_ids = {order.id for order in kept_orders}
    kept_items = [item for item in order_items if item.order_id in kept_ids]
    logger.debug(
        "Filtered training data at {}: {}/{} orders kept",
        cutoff.isoformat(),
        len(kept_orders),
        len(orders),
    )
    return kept_items, kept_orders


def retrain(
    selector: RecommenderSelector,
    order_items: Sequence[OrderItem],
    orders: Sequence[Order],
    *,
    max_time: datetime | None = None,
) -> TrainingReport:
    """Train ``selector`` on a consistent snapshot of the order history."""
    items, kept_orders = filter_before(order_items, orders, max_time)
    logger.info(
        "Training {} on {} orders / {} order items",
        selector.algorithm_name,
        len(kept_orders),
        len(items),
    )
    started = time.perf_counter()
    selector.train(items, kept_orders)
    duration = time.perf_counter() - started

    report = TrainingReport(
        algorithm=selector.algorithm_name,
        orders=len(kept_orders),
        order_items=len(items),
        duration_seconds=duration,
    )
    logger.info("Training finished in {:.3f}s", duration)
    return report


class PeriodicTrainer:
    """Retrain a selector on a background thread at a fixed interval.

    ``load`` is called every cycle and returns ``(order_items, orders)``. A
    failing cycle is logged and retried on the next tick.
    """

    def __init__(
        self,
        selector: RecommenderSelector,
        load: Callable[[], TrainingData],
        interval_seconds: float,
        *,
        max_time: datetime | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.selector = selector
        self.load = load
        self.interval_seconds = interval_seconds
        self.max_time = max_time
        self.last_report: TrainingReport | None = None
        self.failures = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def run_once(self) -> TrainingReport:
        order_items, orders = self.load()
        self.last_report = retrain(self.selector, order_items, orders, max_time=self.max_time)
        return self.last_report

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="recommender-trainer", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.run_once()
            except Exception:
                self.failures += 1
                logger.exception("Scheduled recommender training failed.")
            self._stop.wait(self.interval_seconds)


__all__ = ["PeriodicTrainer", "TrainingReport", "filter_before", "retrain"]

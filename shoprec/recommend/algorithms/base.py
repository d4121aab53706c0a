"""Shared dataclasses and interfaces for recommendation algorithms."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Iterable, Mapping, Sequence

import polars as pl
from loguru import logger

from ...entities import Order, OrderItem, order_items_frame, orders_frame
from ...fields import ORDER_ID, PRODUCT_ID, QUANTITY, USER_ID
from ..errors import NotTrainedError
from ..locks import ReadWriteLock

MAX_NUMBER_OF_RECOMMENDATIONS = 10


@dataclass(slots=True)
class RecommendTrainingData:
    """Order history prepared once per train() call and shared by all algorithms.

    ``items`` holds every order item; ``user_items`` only those whose order is
    known, annotated with the ordering user.
    """

    items: pl.DataFrame
    user_items: pl.DataFrame
    products: list[int]
    user_buying_matrix: dict[int, dict[int, float]]
    order_products: dict[int, frozenset[int]]

    @classmethod
    def build(cls, order_items: Iterable[OrderItem], orders: Iterable[Order]) -> "RecommendTrainingData":
        items = order_items_frame(order_items)
        user_items = items.join(orders_frame(orders), on=ORDER_ID, how="inner")

        matrix: dict[int, dict[int, float]] = {}
        totals = user_items.group_by(USER_ID, PRODUCT_ID).agg(pl.col(QUANTITY).sum())
        for user_id, product_id, quantity in totals.iter_rows():
            matrix.setdefault(user_id, {})[product_id] = float(quantity)

        order_products = {
            order_id: frozenset(products)
            for order_id, products in items.group_by(ORDER_ID)
            .agg(pl.col(PRODUCT_ID).unique())
            .iter_rows()
        }

        return cls(
            items=items,
            user_items=user_items,
            products=sorted(items[PRODUCT_ID].unique().to_list()),
            user_buying_matrix=matrix,
            order_products=order_products,
        )


class BaseRecommendAlgorithm(ABC):
    """Abstract strategy that ranks products for a user and their cart.

    Subclasses implement :meth:`_fit` and :meth:`_recommend`; this class
    handles the training lifecycle and guards model state so recommendations
    never observe a half-trained model.
    """

    name: ClassVar[str] = "base"

    def __init__(self, max_recommendations: int = MAX_NUMBER_OF_RECOMMENDATIONS) -> None:
        self.max_recommendations = max_recommendations
        self.data: RecommendTrainingData | None = None
        self._trained = False
        self._lock = ReadWriteLock()

    @property
    def is_trained(self) -> bool:
        return self._trained

    def train(self, order_items: Sequence[OrderItem], orders: Sequence[Order]) -> None:
        """Rebuild the model from the full order history.

        ``_fit`` must replace model attributes rather than mutate them in place:
        if it raises, the previous attributes are restored so the last good
        model keeps serving, and the error propagates to the caller.
        """
        data = RecommendTrainingData.build(order_items, orders)
        with self._lock.write():
            previous = dict(vars(self))
            try:
                self.data = data
                self._fit(data)
            except Exception:
                vars(self).clear()
                vars(self).update(previous)
                raise
            self._trained = True
        logger.debug(
            "{} trained on {} order items ({} products, {} users).",
            self.name,
            data.items.height,
            len(data.products),
            len(data.user_buying_matrix),
        )

    def recommend_products(self, user_id: int | None, current_items: Sequence[OrderItem]) -> list[int]:
        """Return product ids ranked by relevance, best first."""
        with self._lock.read():
            if not self._trained:
                raise NotTrainedError(f"{self.name} recommender has not finished training.")
            current = [item.product_id for item in current_items]
            return self._recommend(user_id, current)

    def filter_recommendations(self, scores: Mapping[int, float], blocked: Iterable[int]) -> list[int]:
        """Rank ``scores`` descending, skip blocked ids and cap the result length."""
        blocked_ids = set(blocked)
        ranked = sorted(scores.items(), key=lambda kv: (-kv[1], kv[0]))
        result = [product_id for product_id, _ in ranked if product_id not in blocked_ids]
        return result[: self.max_recommendations]

    @abstractmethod
    def _fit(self, data: RecommendTrainingData) -> None:
        """Train internal state; called with exclusive access."""

    @abstractmethod
    def _recommend(self, user_id: int | None, current_items: list[int]) -> list[int]:
        """Rank products for a trained model; called with shared access."""

    def __repr__(self) -> str:
        state = "trained" if self._trained else "not trained"
        return f"{type(self).__name__}({state})"


__all__ = [
    "BaseRecommendAlgorithm",
    "MAX_NUMBER_OF_RECOMMENDATIONS",
    "RecommendTrainingData",
]

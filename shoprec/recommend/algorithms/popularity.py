"""Popularity-based recommendation strategy (non-personalized baseline)."""

from __future__ import annotations

import polars as pl
from loguru import logger

from ...fields import PRODUCT_ID, QUANTITY
from .base import MAX_NUMBER_OF_RECOMMENDATIONS, BaseRecommendAlgorithm, RecommendTrainingData


class PopularityRecommender(BaseRecommendAlgorithm):
    """Recommend the most ordered products, by total quantity.

    The user id is ignored, so this strategy can answer every request once
    trained; it backs every other strategy as the fallback.
    """

    name = "Popularity"

    def __init__(self, max_recommendations: int = MAX_NUMBER_OF_RECOMMENDATIONS) -> None:
        super().__init__(max_recommendations)
        self._counts: dict[int, float] = {}

    def _fit(self, data: RecommendTrainingData) -> None:
        totals = data.items.group_by(PRODUCT_ID).agg(pl.col(QUANTITY).sum())
        self._counts = {product_id: float(quantity) for product_id, quantity in totals.iter_rows()}
        if self._counts:
            logger.debug("Top products by quantity: {}", self.filter_recommendations(self._counts, ())[:5])

    def _recommend(self, user_id: int | None, current_items: list[int]) -> list[int]:
        return self.filter_recommendations(self._counts, current_items)


__all__ = ["PopularityRecommender"]

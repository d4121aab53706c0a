"""Weighted Slope One collaborative filtering over purchase quantities."""

from __future__ import annotations

import numpy as np
from loguru import logger

from ..errors import UseFallbackError
from .base import MAX_NUMBER_OF_RECOMMENDATIONS, BaseRecommendAlgorithm, RecommendTrainingData


class SlopeOneRecommender(BaseRecommendAlgorithm):
    """Predict how much a user would buy of each product they never bought.

    Quantities act as ratings. Item-to-item deviations and co-rating counts
    are learned in fit(); predictions are computed per request.
    """

    name = "SlopeOne"

    def __init__(self, max_recommendations: int = MAX_NUMBER_OF_RECOMMENDATIONS) -> None:
        super().__init__(max_recommendations)
        self._products: np.ndarray = np.empty(0, dtype=np.int64)
        self._product_index: dict[int, int] = {}
        self._deviations: np.ndarray = np.empty((0, 0))
        self._frequencies: np.ndarray = np.empty((0, 0))

    # ------------------------------------------------------------------ #
    # BaseRecommendAlgorithm API
    # ------------------------------------------------------------------ #

    def _fit(self, data: RecommendTrainingData) -> None:
        self._products = np.asarray(data.products, dtype=np.int64)
        self._product_index = {int(pid): idx for idx, pid in enumerate(self._products)}

        users = sorted(data.user_buying_matrix)
        ratings = np.zeros((len(users), len(self._products)), dtype=np.float64)
        rated = np.zeros_like(ratings)
        for row, user_id in enumerate(users):
            for product_id, quantity in data.user_buying_matrix[user_id].items():
                col = self._product_index[product_id]
                ratings[row, col] = quantity
                rated[row, col] = 1.0

        # frequencies[i, j]: users that bought both i and j
        # deviations[i, j]: mean of (r_i - r_j) over those users
        self._frequencies = rated.T @ rated
        diff_sums = ratings.T @ rated - rated.T @ ratings
        with np.errstate(divide="ignore", invalid="ignore"):
            self._deviations = np.where(self._frequencies > 0, diff_sums / self._frequencies, 0.0)

        logger.debug(
            "Slope One matrices built: products={} users={}",
            len(self._products),
            len(users),
        )

    def _recommend(self, user_id: int | None, current_items: list[int]) -> list[int]:
        recommended = self.filter_recommendations(self._predict_for_user(user_id), current_items)
        if not recommended:
            raise UseFallbackError(f"No Slope One predictions left for user {user_id}.")
        return recommended

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _predict_for_user(self, user_id: int | None) -> dict[int, float]:
        if user_id is None:
            raise UseFallbackError("No user id given; Slope One needs a purchase history.")
        if self.data is None:
            raise RuntimeError(f"{self.name} has no training data.")
        history = self.data.user_buying_matrix.get(user_id)
        if not history:
            raise UseFallbackError(f"User {user_id} has no purchase history.")
        return self._predict(history)

    def _predict(self, history: dict[int, float]) -> dict[int, float]:
        cols = np.asarray([self._product_index[pid] for pid in history], dtype=np.int64)
        values = np.asarray(list(history.values()), dtype=np.float64)

        freq = self._frequencies[:, cols]
        weights = freq.sum(axis=1)
        numerator = (self._deviations[:, cols] * freq).sum(axis=1) + freq @ values

        candidates = weights > 0
        candidates[cols] = False
        predictions = numerator[candidates] / weights[candidates]
        return {
            int(pid): float(score)
            for pid, score in zip(self._products[candidates], predictions)
        }


class PreprocessedSlopeOneRecommender(SlopeOneRecommender):
    """Slope One with every user's predictions computed during training."""

    name = "PreprocessedSlopeOne"

    def __init__(self, max_recommendations: int = MAX_NUMBER_OF_RECOMMENDATIONS) -> None:
        super().__init__(max_recommendations)
        self._predictions: dict[int, dict[int, float]] = {}

    def _fit(self, data: RecommendTrainingData) -> None:
        super()._fit(data)
        self._predictions = {
            user_id: self._predict(history)
            for user_id, history in data.user_buying_matrix.items()
        }
        logger.debug("Precomputed Slope One predictions for {} users.", len(self._predictions))

    def _predict_for_user(self, user_id: int | None) -> dict[int, float]:
        if user_id is None:
            raise UseFallbackError("No user id given; Slope One needs a purchase history.")
        try:
            return self._predictions[user_id]
        except KeyError as exc:
            raise UseFallbackError(f"User {user_id} has no precomputed predictions.") from exc


__all__ = ["PreprocessedSlopeOneRecommender", "SlopeOneRecommender"]

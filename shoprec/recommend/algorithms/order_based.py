"""Co-occurrence strategy: recommend what others bought together with the cart."""

from __future__ import annotations

from collections import Counter

from ..errors import UseFallbackError
from .base import MAX_NUMBER_OF_RECOMMENDATIONS, BaseRecommendAlgorithm, RecommendTrainingData


class OrderBasedRecommender(BaseRecommendAlgorithm):
    """Score products by the number of past orders they share with the cart."""

    name = "OrderBased"

    def __init__(self, max_recommendations: int = MAX_NUMBER_OF_RECOMMENDATIONS) -> None:
        super().__init__(max_recommendations)
        self._orders: dict[int, frozenset[int]] = {}
        self._orders_by_product: dict[int, list[int]] = {}

    def _fit(self, data: RecommendTrainingData) -> None:
        index: dict[int, list[int]] = {}
        for order_id, products in data.order_products.items():
            for product_id in products:
                index.setdefault(product_id, []).append(order_id)
        self._orders = dict(data.order_products)
        self._orders_by_product = index

    def _recommend(self, user_id: int | None, current_items: list[int]) -> list[int]:
        if not current_items:
            raise UseFallbackError("Cart is empty; nothing to correlate orders with.")

        cart = set(current_items)
        related = {
            order_id
            for product_id in cart
            for order_id in self._orders_by_product.get(product_id, ())
        }
        counts: Counter[int] = Counter()
        for order_id in related:
            counts.update(self._orders[order_id] - cart)

        if not counts:
            raise UseFallbackError(f"No past orders share products with cart {sorted(cart)}.")
        return self.filter_recommendations(counts, cart)


__all__ = ["OrderBasedRecommender"]

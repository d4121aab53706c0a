import pytest

from conftest import cart
from shoprec.recommend.algorithms import (
    OrderBasedRecommender,
    PopularityRecommender,
    PreprocessedSlopeOneRecommender,
    RecommendTrainingData,
    SlopeOneRecommender,
)
from shoprec.recommend.errors import NotTrainedError, UseFallbackError


@pytest.mark.parametrize(
    "algorithm_cls",
    [PopularityRecommender, SlopeOneRecommender, PreprocessedSlopeOneRecommender, OrderBasedRecommender],
)
def test_untrained_algorithms_signal_not_ready(algorithm_cls):
    algorithm = algorithm_cls()

    with pytest.raises(NotTrainedError):
        algorithm.recommend_products(1, cart(1))
    # the not-ready signal is the Python "unsupported operation"
    assert issubclass(NotTrainedError, NotImplementedError)


def test_training_data_builds_buying_matrix(order_items, orders):
    data = RecommendTrainingData.build(order_items, orders)

    assert data.products == [1, 2, 3, 4]
    assert data.user_buying_matrix[1] == {1: 2.0, 2: 1.0, 3: 1.0}
    assert data.user_buying_matrix[2] == {1: 2.0, 3: 2.0}
    assert data.user_buying_matrix[3] == {2: 1.0, 4: 1.0}
    assert data.order_products[4] == frozenset({2, 4})


def test_training_data_skips_items_of_unknown_orders(order_items, orders):
    data = RecommendTrainingData.build(order_items, orders[:1])

    assert set(data.user_buying_matrix) == {1}
    assert data.items.height == len(order_items)


def test_popularity_ranks_by_total_quantity(order_items, orders):
    algorithm = PopularityRecommender()
    algorithm.train(order_items, orders)

    assert algorithm.recommend_products(None, []) == [1, 3, 2, 4]
    assert algorithm.recommend_products(42, cart(3)) == [1, 2, 4]


def test_popularity_respects_max_recommendations(order_items, orders):
    algorithm = PopularityRecommender(max_recommendations=2)
    algorithm.train(order_items, orders)

    assert algorithm.recommend_products(None, []) == [1, 3]


def test_popularity_with_empty_history_returns_empty_list():
    algorithm = PopularityRecommender()
    algorithm.train([], [])

    assert algorithm.is_trained
    assert algorithm.recommend_products(1, []) == []


@pytest.mark.parametrize("algorithm_cls", [SlopeOneRecommender, PreprocessedSlopeOneRecommender])
def test_slope_one_predicts_unbought_products(algorithm_cls, order_items, orders):
    algorithm = algorithm_cls()
    algorithm.train(order_items, orders)

    # user 3 bought 2 and 4; user 1 links 2 to 1 (+1) and to 3 (+0)
    assert algorithm.recommend_products(3, []) == [1, 3]
    assert algorithm.recommend_products(3, cart(1)) == [3]
    assert algorithm.recommend_products(1, []) == [4]


@pytest.mark.parametrize("algorithm_cls", [SlopeOneRecommender, PreprocessedSlopeOneRecommender])
def test_slope_one_needs_a_known_user(algorithm_cls, order_items, orders):
    algorithm = algorithm_cls()
    algorithm.train(order_items, orders)

    with pytest.raises(UseFallbackError):
        algorithm.recommend_products(None, [])
    with pytest.raises(UseFallbackError):
        algorithm.recommend_products(99, [])


def test_slope_one_without_predictions_uses_fallback(order_items, orders):
    algorithm = SlopeOneRecommender()
    algorithm.train(order_items, orders)

    # user 2 bought 1 and 3; only product 2 can be predicted from those
    assert algorithm.recommend_products(2, []) == [2]
    with pytest.raises(UseFallbackError):
        algorithm.recommend_products(2, cart(2))


def test_order_based_counts_co_occurring_products(order_items, orders):
    algorithm = OrderBasedRecommender()
    algorithm.train(order_items, orders)

    assert algorithm.recommend_products(None, cart(2)) == [1, 4]
    assert algorithm.recommend_products(None, cart(3)) == [1]
    assert algorithm.recommend_products(None, cart(1, 3)) == [2]


def test_order_based_needs_a_related_cart(order_items, orders):
    algorithm = OrderBasedRecommender()
    algorithm.train(order_items, orders)

    with pytest.raises(UseFallbackError):
        algorithm.recommend_products(1, [])
    with pytest.raises(UseFallbackError):
        algorithm.recommend_products(1, cart(99))


def test_retraining_replaces_model(order_items, orders):
    algorithm = PopularityRecommender()
    algorithm.train(order_items, orders)
    algorithm.train(order_items[-2:], orders)

    assert algorithm.recommend_products(None, []) == [1, 4]


def test_failed_training_leaves_algorithm_not_ready(order_items, orders):
    class Broken(PopularityRecommender):
        def _fit(self, data):
            raise RuntimeError("boom")

    algorithm = Broken()
    with pytest.raises(RuntimeError):
        algorithm.train(order_items, orders)
    with pytest.raises(NotTrainedError):
        algorithm.recommend_products(None, [])


def test_failed_retraining_keeps_last_good_model(order_items, orders):
    class FailsOnSecondFit(PopularityRecommender):
        fits = 0

        def _fit(self, data):
            type(self).fits += 1
            if type(self).fits > 1:
                self._counts = {}
                raise RuntimeError("corrupt snapshot")
            super()._fit(data)

    algorithm = FailsOnSecondFit()
    algorithm.train(order_items, orders)

    with pytest.raises(RuntimeError, match="corrupt snapshot"):
        algorithm.train(order_items[-2:], orders)

    assert algorithm.is_trained
    assert algorithm.data is not None and algorithm.data.items.height == len(order_items)
    assert algorithm.recommend_products(None, []) == [1, 3, 2, 4]


def test_slope_one_without_training_data_raises_runtime_error():
    algorithm = SlopeOneRecommender()

    with pytest.raises(RuntimeError, match="no training data"):
        algorithm._predict_for_user(1)

import pytest

from shoprec.recommend.algorithms import (
    ALGORITHMS,
    DEFAULT_ALGORITHM,
    FALLBACK_ALGORITHM,
    BaseRecommendAlgorithm,
    OrderBasedRecommender,
    PopularityRecommender,
    PreprocessedSlopeOneRecommender,
    SlopeOneRecommender,
    available_algorithms,
    lookup,
)


def test_every_registered_name_resolves_to_a_distinct_constructible_type():
    names = ["Popularity", "SlopeOne", "PreprocessedSlopeOne", "OrderBased"]
    types = {lookup(name) for name in names}

    assert len(types) == 4
    for name in names:
        instance = lookup(name)()
        assert isinstance(instance, BaseRecommendAlgorithm)
        assert instance.name == name
        assert not instance.is_trained


def test_registry_maps_expected_classes():
    assert lookup("Popularity") is PopularityRecommender
    assert lookup("SlopeOne") is SlopeOneRecommender
    assert lookup("PreprocessedSlopeOne") is PreprocessedSlopeOneRecommender
    assert lookup("OrderBased") is OrderBasedRecommender


@pytest.mark.parametrize(
    "name",
    [None, "", "popularity", "SLOPEONE", "slope_one", " SlopeOne", "Random"],
)
def test_lookup_is_case_sensitive_and_total(name):
    assert lookup(name) is None


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        ALGORITHMS["Other"] = PopularityRecommender  # type: ignore[index]


def test_default_and_fallback_are_registered():
    assert DEFAULT_ALGORITHM == "SlopeOne"
    assert FALLBACK_ALGORITHM == "Popularity"
    assert available_algorithms() == ["Popularity", "SlopeOne", "PreprocessedSlopeOne", "OrderBased"]


def test_lookup_accepts_custom_registry():
    registry = {"Only": PopularityRecommender}

    assert lookup("Only", registry) is PopularityRecommender
    assert lookup("Popularity", registry) is None

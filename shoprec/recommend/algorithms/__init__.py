"""Algorithm registry and exports."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

from .base import MAX_NUMBER_OF_RECOMMENDATIONS, BaseRecommendAlgorithm, RecommendTrainingData
from .order_based import OrderBasedRecommender
from .popularity import PopularityRecommender
from .slope_one import PreprocessedSlopeOneRecommender, SlopeOneRecommender

AlgorithmFactory = Callable[[], BaseRecommendAlgorithm]

# Names are the values accepted by the RECOMMENDER_ALGORITHM setting.
ALGORITHMS: Mapping[str, AlgorithmFactory] = MappingProxyType(
    {
        "Popularity": PopularityRecommender,
        "SlopeOne": SlopeOneRecommender,
        "PreprocessedSlopeOne": PreprocessedSlopeOneRecommender,
        "OrderBased": OrderBasedRecommender,
    }
)

DEFAULT_ALGORITHM = "SlopeOne"
FALLBACK_ALGORITHM = "Popularity"


def lookup(
    name: str | None,
    registry: Mapping[str, AlgorithmFactory] = ALGORITHMS,
) -> AlgorithmFactory | None:
    """Return the constructor registered under ``name``.

    Matching is exact and case-sensitive ("slopeone" is unknown). Unknown,
    empty or missing names yield ``None``; callers pick the fallback policy.
    """
    if not name:
        return None
    return registry.get(name)


def available_algorithms() -> list[str]:
    """Registered algorithm names in registration order."""
    return list(ALGORITHMS)


__all__ = [
    "ALGORITHMS",
    "AlgorithmFactory",
    "BaseRecommendAlgorithm",
    "DEFAULT_ALGORITHM",
    "FALLBACK_ALGORITHM",
    "MAX_NUMBER_OF_RECOMMENDATIONS",
    "OrderBasedRecommender",
    "PopularityRecommender",
    "PreprocessedSlopeOneRecommender",
    "RecommendTrainingData",
    "SlopeOneRecommender",
    "available_algorithms",
    "lookup",
]

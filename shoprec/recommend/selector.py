"""Strategy selector that serves recommendations with a popularity fallback."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence

from loguru import logger

from ..config import ConfigProvider, EnvConfigProvider
from ..const import ALGORITHM_ENV
from ..entities import Order, OrderItem
from .algorithms import (
    ALGORITHMS,
    DEFAULT_ALGORITHM,
    AlgorithmFactory,
    BaseRecommendAlgorithm,
    PopularityRecommender,
    lookup,
)
from .errors import UseFallbackError


class SelectorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class Outcome(str, Enum):
    """How the primary algorithm answered a single request."""

    OK = "ok"
    NEEDS_FALLBACK = "needs_fallback"
    NOT_READY = "not_ready"
    FAILED = "failed"


@dataclass(slots=True)
class AlgorithmOutcome:
    kind: Outcome
    products: list[int] = field(default_factory=list)
    error: BaseException | None = None


def run_algorithm(
    algorithm: BaseRecommendAlgorithm,
    user_id: int | None,
    current_items: Sequence[OrderItem],
) -> AlgorithmOutcome:
    """Call ``algorithm`` and tag its result instead of letting it raise."""
    try:
        return AlgorithmOutcome(Outcome.OK, algorithm.recommend_products(user_id, current_items))
    except UseFallbackError as exc:
        return AlgorithmOutcome(Outcome.NEEDS_FALLBACK, error=exc)
    except NotImplementedError as exc:
        return AlgorithmOutcome(Outcome.NOT_READY, error=exc)
    except Exception as exc:
        return AlgorithmOutcome(Outcome.FAILED, error=exc)


class RecommenderSelector:
    """Route train/recommend calls to the configured algorithm.

    The primary algorithm is chosen once from the ``RECOMMENDER_ALGORITHM``
    setting; a popularity recommender is always kept alongside it and answers
    whatever the primary cannot. Construction never fails because of the
    primary: unknown names and broken constructors degrade to the default
    algorithm, then to the fallback instance itself.
    """

    def __init__(
        self,
        config_provider: ConfigProvider | None = None,
        *,
        registry: Mapping[str, AlgorithmFactory] = ALGORITHMS,
        default_algorithm: str = DEFAULT_ALGORITHM,
        fallback_factory: AlgorithmFactory = PopularityRecommender,
        max_recommendations: int | None = None,
    ) -> None:
        self._config_provider = config_provider if config_provider is not None else EnvConfigProvider()
        self._registry = registry
        self._max_recommendations = max_recommendations

        # A selector without a fallback is unusable; let this one raise.
        self.fallback: BaseRecommendAlgorithm = self._configure(fallback_factory())
        selected = self._select_primary(default_algorithm)
        self.recommender: BaseRecommendAlgorithm = selected if selected is not None else self.fallback
        self.state = SelectorState.READY

        logger.info(
            "Recommender selector ready: primary={}, fallback={}",
            self.algorithm_name,
            self.fallback_name,
        )

    # ------------------------------------------------------------------ #
    # Initialization
    # ------------------------------------------------------------------ #

    def _select_primary(self, default_algorithm: str) -> BaseRecommendAlgorithm | None:
        selected: BaseRecommendAlgorithm | None = None
        try:
            name = self._config_provider.get(ALGORITHM_ENV)
        except Exception as exc:
            # an unreachable configuration source counts as "not set"
            logger.info("Recommender not set ({}). Using default recommender ({}).", exc, default_algorithm)
            name = None
        else:
            if name is None:
                logger.info("Recommender not set. Using default recommender ({}).", default_algorithm)

        if name is not None:
            factory = lookup(name, self._registry)
            if factory is None:
                logger.warning(
                    "Recommender name {!r} was not found. Using default recommender ({}).",
                    name,
                    default_algorithm,
                )
            else:
                selected = self._instantiate(name, factory)

        if selected is None:
            factory = lookup(default_algorithm, self._registry)
            if factory is None:
                logger.warning("Default recommender {} is not registered. Using fallback.", default_algorithm)
            else:
                selected = self._instantiate(default_algorithm, factory)
        return selected

    def _instantiate(self, name: str, factory: AlgorithmFactory) -> BaseRecommendAlgorithm | None:
        try:
            return self._configure(factory())
        except Exception as exc:
            logger.opt(exception=exc).warning(
                "Could not create an instance of recommender {}: {}",
                name,
                exc,
            )
            return None

    def _configure(self, algorithm: BaseRecommendAlgorithm) -> BaseRecommendAlgorithm:
        if self._max_recommendations is not None:
            algorithm.max_recommendations = self._max_recommendations
        return algorithm

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def algorithm_name(self) -> str:
        return type(self.recommender).__name__

    @property
    def fallback_name(self) -> str:
        return type(self.fallback).__name__

    @property
    def uses_fallback_as_primary(self) -> bool:
        return self.recommender is self.fallback

    # ------------------------------------------------------------------ #
    # Serving
    # ------------------------------------------------------------------ #

    def recommend_products(self, user_id: int | None, current_items: Sequence[OrderItem]) -> list[int]:
        """Recommend products via the primary algorithm, falling back when it cannot answer.

        Raises the primary's not-trained signal unchanged: an untrained model is
        an operational problem and must not be hidden behind popularity results.
        """
        outcome = run_algorithm(self.recommender, user_id, current_items)
        match outcome.kind:
            case Outcome.OK:
                return outcome.products
            case Outcome.NEEDS_FALLBACK:
                logger.trace(
                    "Executing {} as recommender failed. Using fallback recommender. Reason: {}",
                    self.algorithm_name,
                    outcome.error,
                )
                return self.fallback.recommend_products(user_id, current_items)
            case Outcome.NOT_READY:
                logger.error(
                    "Executing {} threw {}. The recommender was not finished with training.",
                    self.algorithm_name,
                    type(outcome.error).__name__,
                )
                if outcome.error is None:
                    raise RuntimeError(f"{self.algorithm_name} reported not-ready without an error")
                raise outcome.error
            case Outcome.FAILED:
                logger.warning(
                    "Executing {} threw an unexpected error. Using fallback recommender. Reason: {!r}",
                    self.algorithm_name,
                    outcome.error,
                )
                return self.fallback.recommend_products(user_id, current_items)
        raise AssertionError(f"Unhandled outcome {outcome.kind}")

    def train(self, order_items: Sequence[OrderItem], orders: Sequence[Order]) -> None:
        """Train the primary, then the fallback.

        A failing primary propagates and leaves the fallback untouched for
        this cycle.
        """
        self.recommender.train(order_items, orders)
        if self.fallback is not self.recommender:
            self.fallback.train(order_items, orders)


# ---------------------------------------------------------------------- #
# Process-wide instance
# ---------------------------------------------------------------------- #

_instance: RecommenderSelector | None = None
_instance_state = SelectorState.UNINITIALIZED
_instance_lock = threading.Lock()


def get_selector(config_provider: ConfigProvider | None = None) -> RecommenderSelector:
    """Return the process-wide selector, creating it on first use.

    ``config_provider`` only matters for the call that creates the instance.
    """
    global _instance, _instance_state
    instance = _instance
    if instance is not None:
        return instance
    with _instance_lock:
        if _instance is None:
            _instance_state = SelectorState.INITIALIZING
            try:
                _instance = RecommenderSelector(config_provider)
            except BaseException:
                _instance_state = SelectorState.UNINITIALIZED
                raise
            _instance_state = SelectorState.READY
        return _instance


def selector_state() -> SelectorState:
    return _instance_state


def reset_selector() -> None:
    """Forget the process-wide selector. Only meant for tests."""
    global _instance, _instance_state
    with _instance_lock:
        _instance = None
        _instance_state = SelectorState.UNINITIALIZED


__all__ = [
    "AlgorithmOutcome",
    "Outcome",
    "RecommenderSelector",
    "SelectorState",
    "get_selector",
    "reset_selector",
    "run_algorithm",
    "selector_state",
]

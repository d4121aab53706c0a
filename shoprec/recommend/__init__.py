"""Recommendation strategies and the selector that serves them."""

from .errors import NotTrainedError, RecommenderError, UseFallbackError
from .selector import RecommenderSelector, get_selector, reset_selector
from .trainer import PeriodicTrainer, TrainingReport, retrain

__all__ = [
    "NotTrainedError",
    "PeriodicTrainer",
    "RecommenderError",
    "RecommenderSelector",
    "TrainingReport",
    "UseFallbackError",
    "get_selector",
    "reset_selector",
    "retrain",
]

"""Configurable product recommender with a popularity fallback."""

from .recommend import RecommenderSelector, get_selector

__all__ = ["RecommenderSelector", "get_selector"]

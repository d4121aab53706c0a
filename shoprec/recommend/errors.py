"""Signals raised by recommender algorithms."""

from __future__ import annotations


class RecommenderError(Exception):
    """Base class for recommender signals."""


class UseFallbackError(RecommenderError):
    """The algorithm cannot answer this particular request.

    Expected and frequent (e.g. a user without purchase history); callers are
    meant to ask the fallback algorithm instead.
    """


class NotTrainedError(RecommenderError, NotImplementedError):
    """The algorithm has not finished training and cannot recommend anything."""


__all__ = ["NotTrainedError", "RecommenderError", "UseFallbackError"]

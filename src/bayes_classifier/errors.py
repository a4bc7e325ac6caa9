"""Exceptions raised by the classifier."""

from __future__ import annotations


class BayesClassifierError(Exception):
    """Base class for all classifier errors."""


class CategoryNotFoundError(BayesClassifierError, KeyError):
    """Raised when a category is used before it has been added."""

    def __init__(self, category: str, action: str = "train") -> None:
        self.category = category
        self.action = action
        super().__init__(f"Cannot {action}; category {category} does not exist")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class UntrainError(BayesClassifierError, ValueError):
    """Raised by strict untraining when a document cannot be removed exactly."""


class NotTrainedError(BayesClassifierError, RuntimeError):
    """Raised when scoring before any category has a positive training count."""


class ScoringError(BayesClassifierError, ValueError):
    """Raised when a score would need the logarithm of a negative ratio."""

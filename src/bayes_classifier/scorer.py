"""Log-probability scoring of text against every category.

For a category ``c`` and the distinct words ``w`` of a query::

    score(c) = sum_w ln(count(c, w) / words(c)) + ln(events(c) / events)

Unseen words and never-trained categories use the smoothing constant
``0.1`` in place of the missing count. A category that has never been
trained divides by ``1`` instead of its word total. Each distinct word
contributes one term no matter how often it occurs in the query.

Arithmetic follows IEEE-754 float rules rather than raising: a category
whose word total has been untrained down to zero divides by ``0.0`` and
scores ``+inf``. The threshold gate in the classifier rejects such scores.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from .errors import NotTrainedError, ScoringError
from .store import CategoryStore
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

SMOOTHING = 0.1


def _divide(numerator: float, denominator: float) -> float:
    """Float division that yields inf/nan on a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _log(value: float) -> float:
    """Natural log with ``ln(0) == -inf``; negative input is an error."""
    if math.isnan(value):
        return value
    if value == 0:
        return -math.inf
    if value < 0:
        raise ScoringError(f"Cannot take the logarithm of negative ratio {value}")
    return math.log(value)


class Scorer:
    """Computes per-category log-probability scores from store state.

    Args:
        store: Category statistics to read.
        tokenizer: Tokenizer for query text (the store's by default).
        language: Language tag (the store's by default).
    """

    def __init__(
        self,
        store: CategoryStore,
        tokenizer: Optional[Tokenizer] = None,
        language: Optional[str] = None,
    ) -> None:
        self.store = store
        self.tokenizer = tokenizer if tokenizer is not None else store.tokenizer
        self.language = language if language is not None else store.language

    def score(self, text: str) -> dict[str, float]:
        """Score ``text`` against every known category.

        Args:
            text: Raw query text.

        Returns:
            Dict of ``{category: score}`` in category insertion order.
            Higher (closer to zero) means more likely.

        Raises:
            NotTrainedError: If the summed training count is not positive.
            ScoringError: If a category's training count is negative.
        """
        word_hash_cache = self.tokenizer.word_hash(text, self.language)

        category_counts = self.store.category_counts
        category_word_count = self.store.category_word_count

        training_count = float(sum(category_counts.values()))
        if training_count <= 0:
            raise NotTrainedError(
                "Classifier has no training events; call train() before scoring."
            )

        scores: dict[str, float] = {}
        for category, category_words in self.store.items():
            total = float(category_word_count.get(category, 1))

            score = 0.0
            for word in word_hash_cache:
                s = category_words[word] if word in category_words else SMOOTHING
                score += _log(_divide(s, total))

            # prior probability for the category
            s = category_counts[category] if category in category_counts else SMOOTHING
            score += _log(_divide(s, training_count))

            scores[category] = score

        logger.debug("Scored %d words against %d categories", len(word_hash_cache), len(scores))
        return scores

"""Online multinomial Naive Bayes text classifier.

Categories are trained one document at a time and can be untrained again.
Classification scores the text against every category and picks the
highest score, optionally rejecting results below a threshold.

Example::

    classifier = Classifier(["Interesting", "Uninteresting"])
    classifier.train("Interesting", "I love this good book")
    classifier.train("Uninteresting", "I hate bad words")

    classifier.classify("I hate bad words and you")   # "Uninteresting"
    classifier.classifications("I hate bad words and you")
    # {"Interesting": -10.89..., "Uninteresting": -3.98...}

Instances are not thread safe; callers that train and classify from
several threads must hold their own lock.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from typing import Optional

from .errors import ScoringError
from .scorer import Scorer
from .store import CategoryStore
from .tokenizer import Stemmer, StopwordSet, Tokenizer, normalize_language


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass
class ClassifierConfig:
    """Classifier options.

    Args:
        language: Language tag selecting stopwords and stemmer.
        auto_categorize: Create unknown categories on ``train``.
        enable_threshold: Reject classifications scoring below ``threshold``.
        threshold: Minimum acceptable score when the threshold is enabled.
        strict_untrain: Make ``untrain`` all-or-nothing instead of lenient.
    """

    language: str = "en"
    auto_categorize: bool = False
    enable_threshold: bool = False
    threshold: float = 0.0
    strict_untrain: bool = False

    def __post_init__(self) -> None:
        self.language = normalize_language(self.language)
        self.threshold = float(self.threshold)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass
class ClassificationResult:
    """Outcome of classifying a single text.

    ``category`` is ``None`` when the threshold rejected the best match;
    ``best_category`` is always the top-scoring category.
    """

    category: Optional[str]
    best_category: str
    score: float
    scores: dict[str, float] = field(default_factory=dict)

    @property
    def rejected(self) -> bool:
        return self.category is None

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "best_category": self.best_category,
            "score": _json_float(self.score),
            "scores": {
                k: _json_float(v) for k, v in sorted(
                    self.scores.items(),
                    key=lambda x: -x[1],
                )
            },
        }


def _json_float(value: float) -> float | str:
    """Round finite scores; spell out infinities and NaN for JSON."""
    if math.isfinite(value):
        return round(value, 4)
    return str(value)


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

class Classifier:
    """Multi-category Naive Bayes classifier with incremental training.

    Args:
        categories: Initial category names, in tie-breaking order.
        language: Language tag for stopwords and stemming (default ``"en"``).
        auto_categorize: Create categories on first ``train``.
        enable_threshold: Apply the threshold gate in :meth:`classify`.
        threshold: Minimum acceptable score.
        strict_untrain: Use all-or-nothing untraining by default.
        stemmer: Stemmer override (Snowball by default).
        stopwords: Stopword lookup override (bundled lists by default).
    """

    def __init__(
        self,
        categories: Iterable[Hashable] = (),
        *,
        language: str = "en",
        auto_categorize: bool = False,
        enable_threshold: bool = False,
        threshold: float = 0.0,
        strict_untrain: bool = False,
        stemmer: Optional[Stemmer] = None,
        stopwords: Optional[StopwordSet] = None,
    ) -> None:
        if isinstance(categories, (str, bytes)):
            categories = [categories]

        self.config = ClassifierConfig(
            language=language,
            auto_categorize=auto_categorize,
            enable_threshold=enable_threshold,
            threshold=threshold,
            strict_untrain=strict_untrain,
        )
        self.tokenizer = Tokenizer(stemmer=stemmer, stopwords=stopwords)
        self.store = CategoryStore(
            tokenizer=self.tokenizer,
            language=self.config.language,
            auto_categorize=self.config.auto_categorize,
        )
        self.scorer = Scorer(self.store)

        for category in categories:
            self.add_category(category)

    @classmethod
    def from_config(
        cls,
        categories: Iterable[Hashable],
        config: ClassifierConfig,
        stemmer: Optional[Stemmer] = None,
        stopwords: Optional[StopwordSet] = None,
    ) -> "Classifier":
        """Build a classifier from a :class:`ClassifierConfig`."""
        return cls(
            categories,
            language=config.language,
            auto_categorize=config.auto_categorize,
            enable_threshold=config.enable_threshold,
            threshold=config.threshold,
            strict_untrain=config.strict_untrain,
            stemmer=stemmer,
            stopwords=stopwords,
        )

    @property
    def language(self) -> str:
        return self.config.language

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def add_category(self, category: Hashable) -> None:
        """Add a category; adding an existing one does nothing.

        Categories added after training start out undertrained and, with
        no word statistics, tend to match text that trained categories
        have never seen. Prefer declaring categories up front.
        """
        self.store.add_category(category)

    def categories(self) -> list[str]:
        """Category names in insertion order."""
        return self.store.categories

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(self, category: Hashable, text: str) -> None:
        """Train a category with one document.

        Raises:
            CategoryNotFoundError: If the category does not exist and
                auto-categorize is disabled.
        """
        self.store.train(category, text)

    def train_many(self, category: Hashable, texts: Iterable[str]) -> None:
        """Train a category with each document in ``texts``."""
        for text in texts:
            self.store.train(category, text)

    def untrain(self, category: Hashable, text: str, strict: Optional[bool] = None) -> None:
        """Remove one previously trained document from a category.

        Use with care: in the default lenient mode the removal is not an
        exact inverse of :meth:`train`. Pass ``strict=True`` (or construct
        with ``strict_untrain=True``) for all-or-nothing removal.

        Raises:
            CategoryNotFoundError: Unknown category in lenient mode.
            UntrainError: Strict removal is impossible.
        """
        if strict is None:
            strict = self.config.strict_untrain
        self.store.untrain(category, text, strict=strict)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classifications(self, text: str) -> dict[str, float]:
        """Score ``text`` against every category.

        The largest score (closest to zero) is the one :meth:`classify`
        picks.

        Raises:
            NotTrainedError: If no category has been trained.
        """
        return self.scorer.score(text)

    def classify_with_score(self, text: str) -> tuple[str, float]:
        """Return the best category and its score.

        Ties go to the category added first.

        Raises:
            NotTrainedError: If no category has been trained.
            ScoringError: If any score is NaN and the ranking is undefined.
        """
        return _best(self.classifications(text))

    def classify(self, text: str) -> Optional[str]:
        """Return the best category, or ``None`` if the threshold rejects it."""
        category, score = self.classify_with_score(text)
        if self._rejects(score):
            return None
        return category

    def classify_result(self, text: str) -> ClassificationResult:
        """Classify ``text`` and keep every category's score."""
        scores = self.classifications(text)
        best, score = _best(scores)
        return ClassificationResult(
            category=None if self._rejects(score) else best,
            best_category=best,
            score=score,
            scores=scores,
        )

    def _rejects(self, score: float) -> bool:
        if not self.threshold_enabled:
            return False
        return score < self.threshold or score == math.inf

    # ------------------------------------------------------------------
    # Threshold
    # ------------------------------------------------------------------

    @property
    def threshold(self) -> float:
        return self.config.threshold

    @threshold.setter
    def threshold(self, value: float) -> None:
        self.config.threshold = float(value)

    def enable_threshold(self) -> None:
        """Apply the threshold to subsequent :meth:`classify` calls."""
        self.config.enable_threshold = True

    def disable_threshold(self) -> None:
        """Stop applying the threshold."""
        self.config.enable_threshold = False

    @property
    def threshold_enabled(self) -> bool:
        return self.config.enable_threshold

    @property
    def threshold_disabled(self) -> bool:
        return not self.config.enable_threshold

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(categories={self.categories()!r}, "
            f"language={self.language!r}, threshold_enabled={self.threshold_enabled})"
        )


def _best(scores: dict[str, float]) -> tuple[str, float]:
    """Highest-scoring ``(category, score)``; earlier categories win ties."""
    undefined = [category for category, score in scores.items() if math.isnan(score)]
    if undefined:
        raise ScoringError(
            f"Cannot rank categories; score is NaN for {', '.join(undefined)}"
        )
    return sorted(scores.items(), key=lambda x: -x[1])[0]

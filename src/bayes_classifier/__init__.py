"""Bayes Classifier -- online multinomial Naive Bayes text classification."""

__version__ = "0.1.0"

from .classifier import ClassificationResult, Classifier, ClassifierConfig
from .errors import (
    BayesClassifierError,
    CategoryNotFoundError,
    NotTrainedError,
    ScoringError,
    UntrainError,
)
from .scorer import SMOOTHING, Scorer
from .store import CategoryStore, category_key
from .tokenizer import (
    BundledStopwords,
    SnowballStemmer,
    Stemmer,
    StopwordSet,
    Tokenizer,
    load_stopwords,
    normalize_language,
    strip_non_word,
    symbol_hash,
    without_punctuation,
    word_hash,
)

__all__ = [
    # Core
    "Classifier",
    "ClassifierConfig",
    "ClassificationResult",
    # Components
    "CategoryStore",
    "Scorer",
    "Tokenizer",
    "category_key",
    "SMOOTHING",
    # Text collaborators
    "Stemmer",
    "StopwordSet",
    "SnowballStemmer",
    "BundledStopwords",
    "load_stopwords",
    "normalize_language",
    "strip_non_word",
    "word_hash",
    "symbol_hash",
    "without_punctuation",
    # Errors
    "BayesClassifierError",
    "CategoryNotFoundError",
    "UntrainError",
    "NotTrainedError",
    "ScoringError",
]

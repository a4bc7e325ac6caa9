"""Shared test fixtures for bayes-classifier tests."""

from __future__ import annotations

import pytest

from bayes_classifier.classifier import Classifier
from bayes_classifier.store import CategoryStore
from bayes_classifier.tokenizer import Stemmer, StopwordSet, Tokenizer


class PluralStemmer(Stemmer):
    """Deterministic stemmer: drops one trailing ``s`` from longer words."""

    def stem(self, word: str, language: str) -> str:
        if len(word) > 3 and word.endswith("s"):
            return word[:-1]
        return word


class SmallStopwords(StopwordSet):
    """A handful of English stopwords, regardless of language."""

    WORDS = frozenset({"the", "and", "you", "this", "that", "with"})

    def is_stopword(self, word: str, language: str) -> bool:
        return word in self.WORDS


@pytest.fixture
def tokenizer() -> Tokenizer:
    """Tokenizer with predictable stemming and stopwords."""
    return Tokenizer(stemmer=PluralStemmer(), stopwords=SmallStopwords())


@pytest.fixture
def store(tokenizer: Tokenizer) -> CategoryStore:
    """Store with categories ``spam`` and ``ham``, untrained."""
    s = CategoryStore(tokenizer=tokenizer)
    s.add_category("spam")
    s.add_category("ham")
    return s


@pytest.fixture
def make_classifier():
    """Factory for classifiers using the deterministic collaborators."""

    def _make(categories=("spam", "ham"), **kwargs) -> Classifier:
        return Classifier(
            categories,
            stemmer=PluralStemmer(),
            stopwords=SmallStopwords(),
            **kwargs,
        )

    return _make


@pytest.fixture
def interesting_classifier() -> Classifier:
    """Classifier with the default Snowball stemmer and bundled stopwords."""
    classifier = Classifier(["Interesting", "Uninteresting"])
    classifier.train("Interesting", "I love this good book")
    classifier.train("Uninteresting", "I hate bad words")
    return classifier

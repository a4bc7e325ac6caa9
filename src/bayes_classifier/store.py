"""Per-category word statistics with incremental train and untrain.

The store owns one word-frequency map per category plus three aggregate
counters that the scorer reads:

- ``category_counts``: number of training events per category
- ``category_word_count``: sum of word counts per category
- ``total_words``: sum of word counts over all categories

Categories keep their insertion order, which decides ties at
classification time. They are never removed.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from enum import Enum
from typing import Optional

from .errors import CategoryNotFoundError, UntrainError
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)


def category_key(name: Hashable) -> str:
    """Normalize a category name to its string key.

    Enum members (symbol-like names) map to their value; anything else
    maps to ``str(name)``.
    """
    if isinstance(name, Enum):
        return str(name.value)
    return str(name)


class CategoryStore:
    """Word-frequency tables and aggregate counters for every category.

    Args:
        tokenizer: Tokenizer used to turn training text into word counts.
        language: Language tag passed to the tokenizer.
        auto_categorize: Create unknown categories on ``train`` instead of
            raising :class:`CategoryNotFoundError`.
    """

    def __init__(
        self,
        tokenizer: Optional[Tokenizer] = None,
        language: str = "en",
        auto_categorize: bool = False,
    ) -> None:
        self.tokenizer = tokenizer if tokenizer is not None else Tokenizer()
        self.language = language
        self.auto_categorize = auto_categorize

        self._categories: dict[str, dict[str, int]] = {}
        self._category_counts: dict[str, int] = {}
        self._category_word_count: dict[str, int] = {}
        self._total_words = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def categories(self) -> list[str]:
        """Category names in insertion order."""
        return list(self._categories)

    @property
    def category_counts(self) -> dict[str, int]:
        """Training events per category (only categories ever trained)."""
        return dict(self._category_counts)

    @property
    def category_word_count(self) -> dict[str, int]:
        """Word totals per category (only categories ever trained)."""
        return dict(self._category_word_count)

    @property
    def total_words(self) -> int:
        return self._total_words

    def words(self, category: Hashable) -> dict[str, int]:
        """Return a copy of a category's word-frequency map.

        Raises:
            CategoryNotFoundError: If the category does not exist.
        """
        key = category_key(category)
        if key not in self._categories:
            raise CategoryNotFoundError(key, action="read")
        return dict(self._categories[key])

    def items(self):
        """Iterate ``(category, word_map)`` pairs in insertion order.

        The maps are the live tables; callers must not mutate them.
        """
        return self._categories.items()

    def __contains__(self, category: object) -> bool:
        return category_key(category) in self._categories  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._categories)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_category(self, category: Hashable) -> str:
        """Add an empty category if it is not already present.

        Returns:
            The normalized category key.
        """
        key = category_key(category)
        if key not in self._categories:
            self._categories[key] = {}
            logger.debug("Added category %r", key)
        return key

    def train(self, category: Hashable, text: str) -> None:
        """Add the words of ``text`` to a category.

        Raises:
            CategoryNotFoundError: If the category is unknown and
                auto-categorize is disabled.
        """
        if self.auto_categorize:
            self.add_category(category)

        key = category_key(category)
        if key not in self._categories:
            raise CategoryNotFoundError(key, action="train")

        # Tokenize first; a stemmer error must leave the counters untouched
        counts = self.tokenizer.word_hash(text, self.language)
        table = self._categories[key]
        self._category_counts[key] = self._category_counts.get(key, 0) + 1

        added = 0
        for word, count in counts.items():
            table[word] = table.get(word, 0) + count
            self._category_word_count[key] = self._category_word_count.get(key, 0) + count
            self._total_words += count
            added += count

        logger.debug("Trained %r with %d words", key, added)

    def untrain(self, category: Hashable, text: str, strict: bool = False) -> None:
        """Remove the words of ``text`` from a category.

        The default (lenient) mode mirrors the long-standing behaviour of
        this classifier and is not an exact inverse of :meth:`train`:

        - the training count is decremented unconditionally;
        - once ``total_words`` is negative, the remaining words of the
          document are skipped;
        - when a word entry drops to zero or below it is deleted, and the
          amount taken off the aggregates is the entry's previous value
          rather than the requested count;
        - the category word total is only reduced while it stays
          non-negative.

        Strict mode validates the whole document first and then removes it
        exactly, or raises :class:`UntrainError` without changing anything.

        Raises:
            CategoryNotFoundError: If the category does not exist (lenient).
            UntrainError: If strict removal is impossible.
        """
        if strict:
            self._untrain_strict(category, text)
            return

        key = category_key(category)
        if key not in self._categories:
            raise CategoryNotFoundError(key, action="untrain")

        pairs = list(self.tokenizer.word_hash(text, self.language).items())
        table = self._categories[key]
        self._category_counts[key] = self._category_counts.get(key, 0) - 1

        for index, (word, count) in enumerate(pairs):
            if self._total_words < 0:
                logger.warning(
                    "total_words is negative; skipped %d remaining words untraining %r",
                    len(pairs) - index,
                    key,
                )
                break

            orig = table.get(word, 0)
            table[word] = orig - count

            if table[word] <= 0:
                del table[word]
                count = orig

            current = self._category_word_count.get(key, 0)
            if current >= count:
                self._category_word_count[key] = current - count
            self._total_words -= count

        logger.debug("Untrained %r", key)

    def _untrain_strict(self, category: Hashable, text: str) -> None:
        key = category_key(category)
        if key not in self._categories:
            raise UntrainError(f"Cannot untrain; category {key} does not exist")
        if self._category_counts.get(key, 0) <= 0:
            raise UntrainError(f"Cannot untrain; category {key} has no training events")

        table = self._categories[key]
        counts = self.tokenizer.word_hash(text, self.language)

        missing = [word for word, count in counts.items() if table.get(word, 0) < count]
        if missing:
            raise UntrainError(
                f"Cannot untrain; category {key} has fewer occurrences of "
                f"{', '.join(sorted(missing))} than the document"
            )

        self._category_counts[key] -= 1
        for word, count in counts.items():
            table[word] -= count
            if table[word] == 0:
                del table[word]
            self._category_word_count[key] -= count
            self._total_words -= count

        logger.debug("Strictly untrained %r", key)

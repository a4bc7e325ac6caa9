"""Tests for CategoryStore bookkeeping: categories, train, and untrain."""

from __future__ import annotations

import logging
from enum import Enum

import pytest

from bayes_classifier.errors import CategoryNotFoundError, UntrainError
from bayes_classifier.store import CategoryStore, category_key
from bayes_classifier.tokenizer import Stemmer, Tokenizer


class Label(str, Enum):
    SPAM = "spam"
    HAM = "ham"


class FailingStemmer(Stemmer):
    """Stemmer that fails on every word."""

    def stem(self, word: str, language: str) -> str:
        raise RuntimeError(f"cannot stem {word!r}")


@pytest.fixture
def failing_store() -> CategoryStore:
    s = CategoryStore(tokenizer=Tokenizer(stemmer=FailingStemmer()))
    s.add_category("spam")
    return s


def _snapshot(store: CategoryStore) -> tuple:
    return (
        {c: dict(words) for c, words in store.items()},
        store.category_counts,
        store.category_word_count,
        store.total_words,
    )


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class TestCategories:
    """Tests for category lifecycle and name normalization."""

    def test_add_category_is_idempotent(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills")
        store.add_category("spam")
        assert store.categories == ["spam", "ham"]
        assert store.words("spam") == {"cheap": 1, "pill": 1}

    def test_insertion_order(self, store: CategoryStore) -> None:
        store.add_category("eggs")
        store.add_category("bacon")
        assert store.categories == ["spam", "ham", "eggs", "bacon"]

    def test_enum_names_normalize_to_value(self, store: CategoryStore) -> None:
        assert category_key(Label.SPAM) == "spam"
        store.train(Label.SPAM, "cheap pills")
        assert store.category_counts == {"spam": 1}
        assert Label.HAM in store

    def test_non_string_names(self) -> None:
        assert category_key(42) == "42"

    def test_new_category_has_no_counters(self, store: CategoryStore) -> None:
        assert store.words("ham") == {}
        assert "ham" not in store.category_counts
        assert "ham" not in store.category_word_count

    def test_words_unknown_category(self, store: CategoryStore) -> None:
        with pytest.raises(CategoryNotFoundError):
            store.words("eggs")

    def test_words_returns_copy(self, store: CategoryStore) -> None:
        store.train("spam", "cheap")
        store.words("spam")["cheap"] = 100
        assert store.words("spam") == {"cheap": 1}


# ---------------------------------------------------------------------------
# Training
# ---------------------------------------------------------------------------

class TestTrain:
    """Tests for CategoryStore.train."""

    def test_updates_all_counters(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills cheap offers")
        assert store.words("spam") == {"cheap": 2, "pill": 1, "offer": 1}
        assert store.category_counts == {"spam": 1}
        assert store.category_word_count == {"spam": 4}
        assert store.total_words == 4

    def test_count_increments_once_per_call(self, store: CategoryStore) -> None:
        store.train("spam", "one two three four five")
        store.train("spam", "")
        assert store.category_counts["spam"] == 2

    def test_total_words_sums_categories(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills")
        store.train("ham", "lunch meeting tomorrow")
        assert store.total_words == 5
        assert sum(store.category_word_count.values()) == store.total_words

    def test_empty_document_leaves_word_count_absent(self, store: CategoryStore) -> None:
        store.train("ham", "a an the")
        assert store.category_counts == {"ham": 1}
        assert "ham" not in store.category_word_count

    def test_unknown_category_raises(self, store: CategoryStore) -> None:
        with pytest.raises(CategoryNotFoundError, match="Cannot train; category eggs does not exist"):
            store.train("eggs", "bacon")
        assert store.categories == ["spam", "ham"]
        assert store.total_words == 0

    def test_not_found_is_a_key_error(self, store: CategoryStore) -> None:
        with pytest.raises(KeyError):
            store.train("eggs", "bacon")

    def test_auto_categorize_creates_category(self, tokenizer) -> None:
        s = CategoryStore(tokenizer=tokenizer, auto_categorize=True)
        s.train("eggs", "scrambled eggs")
        assert s.categories == ["eggs"]
        assert s.words("eggs") == {"scrambled": 1, "egg": 1}

    def test_never_stores_stopwords_or_short_tokens(self, store: CategoryStore) -> None:
        store.train("spam", "the an it you and cheap this")
        assert store.words("spam") == {"cheap": 1}

    def test_tokenizer_failure_leaves_counters_unchanged(
        self, failing_store: CategoryStore
    ) -> None:
        before = _snapshot(failing_store)
        with pytest.raises(RuntimeError, match="cannot stem"):
            failing_store.train("spam", "cheap pills")
        assert _snapshot(failing_store) == before
        assert failing_store.category_counts == {}


# ---------------------------------------------------------------------------
# Lenient untraining
# ---------------------------------------------------------------------------

class TestUntrain:
    """Tests for the default (lenient) CategoryStore.untrain."""

    def test_round_trip_restores_aggregates(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills")
        before = (store.category_word_count["spam"], store.total_words)
        store.train("spam", "cheap offers cheap")
        store.untrain("spam", "cheap offers cheap")
        assert (store.category_word_count["spam"], store.total_words) == before
        assert store.words("spam") == {"cheap": 1, "pill": 1}
        assert store.category_counts["spam"] == 1

    def test_entries_reaching_zero_are_removed(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills")
        store.untrain("spam", "cheap pills")
        assert store.words("spam") == {}
        assert store.category_word_count["spam"] == 0
        assert store.total_words == 0
        assert store.category_counts["spam"] == 0

    def test_over_untrain_subtracts_previous_value(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills")
        store.untrain("spam", "cheap cheap cheap")
        # only the one stored "cheap" comes off the aggregates
        assert store.words("spam") == {"pill": 1}
        assert store.category_word_count["spam"] == 1
        assert store.total_words == 1

    def test_unseen_word_is_a_no_op(self, store: CategoryStore) -> None:
        store.train("spam", "cheap")
        store.untrain("spam", "lunch")
        assert store.words("spam") == {"cheap": 1}
        assert store.category_word_count["spam"] == 1
        assert store.total_words == 1
        assert store.category_counts["spam"] == 0

    def test_count_not_floored_at_zero(self, store: CategoryStore) -> None:
        store.untrain("ham", "lunch")
        store.untrain("ham", "lunch")
        assert store.category_counts["ham"] == -2

    def test_word_count_not_reduced_below_zero(self, store: CategoryStore) -> None:
        store.train("spam", "cheap")
        store._category_word_count["spam"] = 0
        store.untrain("spam", "cheap")
        assert store.category_word_count["spam"] == 0
        assert store.total_words == 0

    def test_negative_total_skips_remaining_words(self, store: CategoryStore, caplog) -> None:
        store.train("spam", "cheap cheap cheap pills")
        store._total_words = 2

        with caplog.at_level(logging.WARNING, logger="bayes_classifier.store"):
            store.untrain("spam", "cheap cheap cheap pills")

        # "cheap" is removed and drives the total negative; "pills" is skipped
        assert store.words("spam") == {"pill": 1}
        assert store.category_word_count["spam"] == 1
        assert store.total_words == -1
        assert store.category_counts["spam"] == 0
        assert "skipped 1 remaining words" in caplog.text

    def test_negative_total_skips_everything(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills")
        store._total_words = -1
        store.untrain("spam", "cheap pills")
        assert store.words("spam") == {"cheap": 1, "pill": 1}
        assert store.category_counts["spam"] == 0

    def test_unknown_category_raises_before_mutation(self, store: CategoryStore) -> None:
        store.train("spam", "cheap")
        before = _snapshot(store)
        with pytest.raises(CategoryNotFoundError, match="untrain"):
            store.untrain("eggs", "cheap")
        assert _snapshot(store) == before

    @pytest.mark.parametrize("strict", [False, True])
    def test_tokenizer_failure_leaves_counters_unchanged(
        self, failing_store: CategoryStore, strict: bool
    ) -> None:
        # only punctuation and short tokens, so nothing reaches the stemmer
        failing_store.train("spam", "ok !!")
        before = _snapshot(failing_store)
        with pytest.raises(RuntimeError, match="cannot stem"):
            failing_store.untrain("spam", "cheap pills", strict=strict)
        assert _snapshot(failing_store) == before
        assert failing_store.category_counts == {"spam": 1}


# ---------------------------------------------------------------------------
# Strict untraining
# ---------------------------------------------------------------------------

class TestStrictUntrain:
    """Tests for all-or-nothing untraining."""

    def test_exact_inverse(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills")
        before = _snapshot(store)
        store.train("spam", "cheap offers")
        store.untrain("spam", "cheap offers", strict=True)
        assert _snapshot(store) == before

    def test_unknown_category(self, store: CategoryStore) -> None:
        with pytest.raises(UntrainError, match="does not exist"):
            store.untrain("eggs", "cheap", strict=True)

    def test_untrained_category(self, store: CategoryStore) -> None:
        before = _snapshot(store)
        with pytest.raises(UntrainError, match="no training events"):
            store.untrain("ham", "lunch", strict=True)
        assert _snapshot(store) == before

    def test_missing_words_leave_state_untouched(self, store: CategoryStore) -> None:
        store.train("spam", "cheap pills")
        before = _snapshot(store)
        with pytest.raises(UntrainError, match="cheap, offer"):
            store.untrain("spam", "pills cheap cheap offers", strict=True)
        assert _snapshot(store) == before

    def test_untrain_error_is_value_error(self, store: CategoryStore) -> None:
        with pytest.raises(ValueError):
            store.untrain("ham", "lunch", strict=True)

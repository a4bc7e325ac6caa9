"""Text tokenization into stemmed word-frequency maps.

Turns raw text into the ``{stem: count}`` mappings that the category store
trains on and the scorer reads. Two collaborators are consumed through
narrow interfaces:

- ``Stemmer``: reduces an inflected word to its root for a language.
  The default adapter wraps NLTK's Snowball stemmers.
- ``StopwordSet``: decides whether a word is too common to count.
  The default reads per-language word lists bundled with the package.

Stopword lists are loaded lazily, at most once per language, and shared by
every tokenizer in the process.
"""

from __future__ import annotations

import logging
import re
import threading
import unicodedata
from abc import ABC, abstractmethod
from importlib import resources
from typing import Optional

from nltk.stem.snowball import SnowballStemmer as _NltkSnowballStemmer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Language tags
# ---------------------------------------------------------------------------

# "en", "pt-BR", "zh_Hant"; never a path or a dotted file name
_LANGUAGE_TAG_RE = re.compile(r"^[a-z]{2,3}(?:[-_][a-z0-9]{1,8})*$")


def normalize_language(language: str) -> str:
    """Return the canonical lowercase form of a language tag.

    Args:
        language: Tag such as ``"en"`` or ``" PT-br "``.

    Returns:
        The stripped, lowercased tag.

    Raises:
        ValueError: If ``language`` is not a string or not a well-formed tag.
    """
    if not isinstance(language, str):
        raise ValueError(f"language must be a string, got {language!r}")
    tag = language.strip().lower()
    if not _LANGUAGE_TAG_RE.match(tag):
        raise ValueError(f"language must be a tag such as 'en' or 'pt-br', got {language!r}")
    return tag


# ---------------------------------------------------------------------------
# Stopwords
# ---------------------------------------------------------------------------

_STOPWORD_PACKAGE = "bayes_classifier.data.stopwords"

_STOPWORD_CACHE: dict[str, frozenset[str]] = {}
_STOPWORD_LOCK = threading.Lock()


def load_stopwords(language: str) -> frozenset[str]:
    """Return the bundled stopword list for a language.

    The list is read from ``data/stopwords/<tag>`` on first use and cached
    for the life of the process. Tags are matched case-insensitively.
    Languages without a bundled list get an empty set.

    Args:
        language: Language tag such as ``"en"``.

    Returns:
        Frozen set of lowercase stopwords.

    Raises:
        ValueError: If ``language`` is not a well-formed tag.
    """
    cached = _STOPWORD_CACHE.get(language)
    if cached is not None:
        return cached

    tag = normalize_language(language)
    with _STOPWORD_LOCK:
        # Another thread may have filled the entry while we waited
        cached = _STOPWORD_CACHE.get(tag)
        if cached is None:
            cached = _read_stopwords(tag)
            _STOPWORD_CACHE[tag] = cached
        _STOPWORD_CACHE[language] = cached
        return cached


def _read_stopwords(tag: str) -> frozenset[str]:
    resource = resources.files(_STOPWORD_PACKAGE).joinpath(tag)
    if not resource.is_file():
        logger.debug("No stopword list for language %r; filtering disabled", tag)
        return frozenset()

    lines = resource.read_text(encoding="utf-8").splitlines()
    words = frozenset(
        line.strip().lower()
        for line in lines
        if line.strip() and not line.lstrip().startswith("#")
    )
    logger.debug("Loaded %d stopwords for language %r", len(words), tag)
    return words


class StopwordSet(ABC):
    """Decides whether a word should be excluded from frequency counts."""

    @abstractmethod
    def is_stopword(self, word: str, language: str) -> bool:
        """Return True if ``word`` is a stopword in ``language``."""
        ...


class BundledStopwords(StopwordSet):
    """Stopword lists shipped in ``bayes_classifier/data/stopwords``."""

    def is_stopword(self, word: str, language: str) -> bool:
        return word in load_stopwords(language)


# ---------------------------------------------------------------------------
# Stemming
# ---------------------------------------------------------------------------

# Language tags understood by NLTK's Snowball implementation
SNOWBALL_LANGUAGES: dict[str, str] = {
    "ar": "arabic",
    "da": "danish",
    "de": "german",
    "en": "english",
    "es": "spanish",
    "fi": "finnish",
    "fr": "french",
    "hu": "hungarian",
    "it": "italian",
    "nl": "dutch",
    "no": "norwegian",
    "pt": "portuguese",
    "ro": "romanian",
    "ru": "russian",
    "sv": "swedish",
}


class Stemmer(ABC):
    """Maps an inflected word to its canonical root for a language."""

    @abstractmethod
    def stem(self, word: str, language: str) -> str:
        """Return the stem of ``word``."""
        ...


class SnowballStemmer(Stemmer):
    """Adapter over ``nltk.stem.snowball.SnowballStemmer``.

    One NLTK stemmer is built per language and reused. Tags without a
    Snowball algorithm fall back to the Porter stemmer.
    """

    def __init__(self) -> None:
        self._stemmers: dict[str, _NltkSnowballStemmer] = {}
        self._lock = threading.Lock()

    def stem(self, word: str, language: str) -> str:
        return self._stemmer_for(language).stem(word)

    def _stemmer_for(self, language: str) -> _NltkSnowballStemmer:
        stemmer = self._stemmers.get(language)
        if stemmer is not None:
            return stemmer

        tag = normalize_language(language)
        with self._lock:
            stemmer = self._stemmers.get(tag)
            if stemmer is None:
                name = SNOWBALL_LANGUAGES.get(tag)
                if name is None:
                    logger.debug("No Snowball stemmer for %r; using porter", tag)
                    name = "porter"
                stemmer = _NltkSnowballStemmer(name)
                self._stemmers[tag] = stemmer
            self._stemmers[language] = stemmer
        return stemmer


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WORD_CHAR_RE = re.compile(r"\w")

# Characters outside ``\w`` that still count as part of a word
_EXTRA_WORD_CATEGORIES = frozenset({"Mn", "Mc", "Me", "Pc"})
_JOIN_CONTROLS = frozenset({"\u200c", "\u200d"})

_PUNCTUATION_TO_SPACE = str.maketrans({c: " " for c in ",?.!;:\"@#$%^&*()_=+[]{}\\|<>/`~"})
_PUNCTUATION_TO_DROP = str.maketrans({"'": None, "-": None})

MIN_TOKEN_LENGTH = 3


def without_punctuation(text: str) -> str:
    """Replace common punctuation with spaces and drop apostrophes and hyphens.

    Example::

        >>> without_punctuation("Hello (greeting's), with {braces}")
        'Hello  greetings   with  braces '
    """
    return text.translate(_PUNCTUATION_TO_SPACE).translate(_PUNCTUATION_TO_DROP)


def symbol_hash(text: str) -> dict[str, int]:
    """Count the runs of non-word characters in ``text``.

    Every word character is blanked out and what remains is split on
    whitespace, so ``"a :) b :)"`` yields ``{":)": 2}``.
    """
    counts: dict[str, int] = {}
    for symbol in _WORD_CHAR_RE.sub(" ", text).split():
        counts[symbol] = counts.get(symbol, 0) + 1
    return counts


def _keep_word_char(match: re.Match) -> str:
    char = match.group()
    if char in _JOIN_CONTROLS or unicodedata.category(char) in _EXTRA_WORD_CATEGORIES:
        return char
    return ""


def strip_non_word(text: str) -> str:
    """Remove every character that is neither a word character nor whitespace.

    Combining marks count as word characters, so decomposed text such as
    ``"nai\\u0308ve"`` keeps its diaeresis.
    """
    return _NON_WORD_RE.sub(_keep_word_char, text)


class Tokenizer:
    """Turns text into a stemmed word-frequency mapping.

    Example::

        tokenizer = Tokenizer()
        tokenizer.word_hash("I hate bad words", "en")
        # {'hate': 1, 'bad': 1, 'word': 1}

    Args:
        stemmer: Stemmer to apply to kept tokens (Snowball by default).
        stopwords: Stopword lookup (bundled lists by default).
    """

    def __init__(
        self,
        stemmer: Optional[Stemmer] = None,
        stopwords: Optional[StopwordSet] = None,
    ) -> None:
        self.stemmer = stemmer if stemmer is not None else _default_stemmer()
        self.stopwords = stopwords if stopwords is not None else BundledStopwords()

    def word_hash(self, text: str, language: str = "en") -> dict[str, int]:
        """Count stemmed words in ``text``.

        Punctuation is removed, the text is lowercased and split on
        whitespace. Tokens of two characters or fewer and stopwords are
        discarded; the rest are stemmed and counted in first-seen order.

        Args:
            text: Raw input text.
            language: Language tag selecting stopwords and stemmer.

        Returns:
            Dict of ``{stem: count}``.
        """
        counts: dict[str, int] = {}
        for token in strip_non_word(text).lower().split():
            if len(token) < MIN_TOKEN_LENGTH:
                continue
            if self.stopwords.is_stopword(token, language):
                continue
            stem = self.stemmer.stem(token, language)
            counts[stem] = counts.get(stem, 0) + 1
        return counts

    def word_hash_with_symbols(self, text: str, language: str = "en") -> dict[str, int]:
        """Like :meth:`word_hash`, plus counts of punctuation symbols."""
        counts = self.word_hash(text, language)
        counts.update(symbol_hash(text))
        return counts


_DEFAULT_STEMMER: Optional[SnowballStemmer] = None


def _default_stemmer() -> SnowballStemmer:
    global _DEFAULT_STEMMER
    if _DEFAULT_STEMMER is None:
        _DEFAULT_STEMMER = SnowballStemmer()
    return _DEFAULT_STEMMER


def word_hash(text: str, language: str = "en") -> dict[str, int]:
    """Tokenize ``text`` with the default stemmer and bundled stopwords."""
    return Tokenizer().word_hash(text, language)

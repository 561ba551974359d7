"""Text normalization and tokenization.

Turns raw document text into normalized term sequences:

1. Segment into word-like units and punctuation runs
2. Discard punctuation-only and purely numeric tokens
3. Lowercase
4. Remove English stopwords
5. Stem with the Snowball English stemmer
6. Drop empty results

The tokenizer is pure: the same text always yields the same tokens.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

from nltk.stem import SnowballStemmer

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Word runs (allowing inner apostrophes and hyphens), punctuation runs, or
# underscore runs. "_" joins n-gram terms, so it never appears inside a token.
_SEGMENT_RE = re.compile(r"[^\W_]+(?:['\-][^\W_]+)*|[^\w\s]+|_+", re.UNICODE)

_NUMERIC_RE = re.compile(r"^[+-]?\d+(?:[.,]\d+)*$")

STOP_WORDS: frozenset[str] = frozenset({
    "i", "me", "my", "myself", "we", "our", "ours", "ourselves", "you",
    "your", "yours", "yourself", "yourselves", "he", "him", "his",
    "himself", "she", "her", "hers", "herself", "it", "its", "itself",
    "they", "them", "their", "theirs", "themselves", "what", "which", "who",
    "whom", "this", "that", "these", "those", "am", "is", "are", "was",
    "were", "be", "been", "being", "have", "has", "had", "having", "do",
    "does", "did", "doing", "would", "should", "could", "ought", "i'm",
    "you're", "he's", "she's", "it's", "we're", "they're", "i've",
    "you've", "we've", "they've", "i'd", "you'd", "he'd", "she'd", "we'd",
    "they'd", "i'll", "you'll", "he'll", "she'll", "we'll", "they'll",
    "isn't", "aren't", "wasn't", "weren't", "hasn't", "haven't", "hadn't",
    "doesn't", "don't", "didn't", "won't", "wouldn't", "shan't",
    "shouldn't", "can't", "cannot", "couldn't", "mustn't", "let's",
    "that's", "who's", "what's", "here's", "there's", "when's", "where's",
    "why's", "how's", "a", "an", "the", "and", "but", "if", "or",
    "because", "as", "until", "while", "of", "at", "by", "for", "with",
    "about", "against", "between", "into", "through", "during", "before",
    "after", "above", "below", "to", "from", "up", "down", "in", "out",
    "on", "off", "over", "under", "again", "further", "then", "once",
    "here", "there", "when", "where", "why", "how", "all", "any", "both",
    "each", "few", "more", "most", "other", "some", "such", "no", "nor",
    "not", "only", "own", "same", "so", "than", "too", "very", "will",
    "s", "t", "can", "just", "don", "now", "d", "ll", "m", "o", "re",
    "ve", "y", "also",
})


def is_punctuation(token: str) -> bool:
    """True if the token contains no letters or digits."""
    return not any(ch.isalnum() for ch in token)


def is_numeric(token: str) -> bool:
    """True for plain numbers such as ``42``, ``3.5`` or ``1,000``."""
    return bool(_NUMERIC_RE.match(token))


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


class Tokenizer:
    """Normalize raw text into stemmed, stopword-free tokens.

    Example::

        tokenizer = Tokenizer()
        tokenizer.tokenize("The parties agreed to 3 amendments.")
        # ['parti', 'agre', 'amend']

    Args:
        stem: Apply the Snowball English stemmer.
        extra_stopwords: Additional words removed after lowercasing.
        min_length: Minimum token length kept after stemming.
    """

    def __init__(
        self,
        stem: bool = True,
        extra_stopwords: Iterable[str] = (),
        min_length: int = 1,
    ) -> None:
        self.stem = stem
        self.stopwords = STOP_WORDS | frozenset(w.lower() for w in extra_stopwords)
        self.min_length = min_length
        self._stemmer = SnowballStemmer("english") if stem else None

    def segment(self, text: str) -> list[str]:
        """Split text into raw word-like units and punctuation runs."""
        if not text:
            return []
        text = unicodedata.normalize("NFC", text)
        text = text.replace("’", "'").replace("‘", "'")
        return _SEGMENT_RE.findall(text)

    def tokenize(self, text: str) -> list[str]:
        """Return the normalized token sequence for ``text``."""
        tokens: list[str] = []
        for raw in self.segment(text):
            if is_punctuation(raw) or is_numeric(raw):
                continue
            token = raw.lower()
            if token in self.stopwords:
                continue
            if self._stemmer is not None:
                token = self._stemmer.stem(token)
            token = token.strip("'-_")
            if token and len(token) >= self.min_length:
                tokens.append(token)
        return tokens

    def tokenize_many(self, texts: Iterable[str]) -> list[list[str]]:
        return [self.tokenize(text) for text in texts]


_DEFAULT_TOKENIZER: Tokenizer | None = None


def tokenize(text: str) -> list[str]:
    """Tokenize with a shared default :class:`Tokenizer`."""
    global _DEFAULT_TOKENIZER
    if _DEFAULT_TOKENIZER is None:
        _DEFAULT_TOKENIZER = Tokenizer()
    return _DEFAULT_TOKENIZER.tokenize(text)

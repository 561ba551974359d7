"""Tests for text normalization and tokenization."""

from __future__ import annotations

import pytest

from nbtext.features import bigrams
from nbtext.tokenizer import STOP_WORDS, Tokenizer, is_numeric, is_punctuation, tokenize


class TestHelpers:
    """Tests for token classification helpers."""

    @pytest.mark.parametrize("token", ["42", "3.14", "1,000", "2024"])
    def test_numeric_tokens(self, token: str) -> None:
        assert is_numeric(token)

    @pytest.mark.parametrize("token", ["covid19", "abc", "3rd", "a1"])
    def test_non_numeric_tokens(self, token: str) -> None:
        assert not is_numeric(token)

    @pytest.mark.parametrize("token", [",", "...", "!?", "--", "_"])
    def test_punctuation_tokens(self, token: str) -> None:
        assert is_punctuation(token)

    def test_word_is_not_punctuation(self) -> None:
        assert not is_punctuation("word")


class TestTokenizer:
    """Tests for the Tokenizer pipeline."""

    @pytest.fixture
    def plain(self) -> Tokenizer:
        return Tokenizer(stem=False)

    def test_lowercases(self, plain: Tokenizer) -> None:
        assert plain.tokenize("Market RALLY") == ["market", "rally"]

    def test_drops_punctuation_and_numbers(self, plain: Tokenizer) -> None:
        tokens = plain.tokenize("Hello, world! 42 apples cost 3.50 (total: 1,000).")
        assert tokens == ["hello", "world", "apples", "cost", "total"]

    def test_removes_stopwords(self, plain: Tokenizer) -> None:
        tokens = plain.tokenize("The patient is in the hospital and it's fine")
        assert "the" not in tokens
        assert "is" not in tokens
        assert "it's" not in tokens
        assert tokens == ["patient", "hospital", "fine"]

    def test_keeps_hyphenated_words(self, plain: Tokenizer) -> None:
        assert plain.tokenize("A state-of-the-art clinic") == ["state-of-the-art", "clinic"]

    def test_splits_on_underscores(self, plain: Tokenizer) -> None:
        assert plain.tokenize("foo_bar baz __init__") == ["foo", "bar", "baz", "init"]

    def test_bigram_terms_have_one_separator(self, plain: Tokenizer) -> None:
        first = bigrams(plain.tokenize("foo_bar baz"))
        second = bigrams(plain.tokenize("foo bar_baz"))
        assert all(term.count("_") == 1 for term in first + second)
        assert first == ["foo_bar", "bar_baz"]

    def test_extra_stopwords(self) -> None:
        tokenizer = Tokenizer(stem=False, extra_stopwords=["Market"])
        assert tokenizer.tokenize("stock market news") == ["stock", "news"]

    def test_min_length(self) -> None:
        tokenizer = Tokenizer(stem=False, min_length=4)
        assert tokenizer.tokenize("big bank lending") == ["bank", "lending"]

    def test_stemming_merges_inflections(self) -> None:
        tokenizer = Tokenizer()
        assert tokenizer.tokenize("markets") == tokenizer.tokenize("market")
        assert tokenizer.tokenize("trading") == tokenizer.tokenize("trade")

    def test_stopwords_removed_before_stemming(self) -> None:
        # "was" would stem to "was"; it must be dropped as a stopword first
        assert Tokenizer().tokenize("was") == []

    def test_empty_text(self) -> None:
        assert Tokenizer().tokenize("") == []

    def test_only_noise_yields_empty(self) -> None:
        assert Tokenizer().tokenize("The, and... 2024 -- 3.5!") == []

    def test_curly_apostrophes_normalized(self, plain: Tokenizer) -> None:
        assert plain.tokenize("It’s done") == ["done"]

    def test_deterministic(self, documents) -> None:
        tokenizer = Tokenizer()
        for doc in documents:
            assert tokenizer.tokenize(doc.text) == tokenizer.tokenize(doc.text)
            assert Tokenizer().tokenize(doc.text) == tokenizer.tokenize(doc.text)

    def test_tokenize_many(self) -> None:
        result = Tokenizer(stem=False).tokenize_many(["stock market", "", "patient"])
        assert result == [["stock", "market"], [], ["patient"]]

    def test_module_level_tokenize(self) -> None:
        assert tokenize("Stock markets") == Tokenizer().tokenize("Stock markets")

    def test_no_token_is_stopword_or_empty(self, documents) -> None:
        tokenizer = Tokenizer(stem=False)
        for doc in documents:
            for token in tokenizer.tokenize(doc.text):
                assert token
                assert token not in STOP_WORDS

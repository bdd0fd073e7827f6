import pytest

from word_tokenizer import tokenize


def test_strips_edge_punctuation_and_lowercases():
    assert tokenize("Totally!!! Awesome.", min_length=5) == ["totally", "awesome"]


def test_short_words_dropped_with_default_length():
    assert tokenize("the quick brown foxes jumped") == ["quick", "brown", "foxes", "jumped"]


def test_interior_non_alphabetic_tokens_dropped():
    assert tokenize("well-known h4ckers 'quoted' shouldn't", min_length=1) == ["'quoted'", "shouldn't"]


def test_empty_and_null_input():
    assert tokenize(None) == []
    assert tokenize("") == []
    assert tokenize("... !!! ???", min_length=1) == []


def test_order_preserved():
    assert tokenize("zebra apple zebra", min_length=1) == ["zebra", "apple", "zebra"]


def test_invalid_min_length():
    with pytest.raises(ValueError):
        tokenize("anything", min_length=0)

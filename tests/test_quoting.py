# tests/test_quoting.py
from __future__ import annotations

import pytest

from tabline.interface.quoting import needs_quoting, quote, quote_if_needed
from tabline.interface.tokenizer import tokenize


@pytest.mark.parametrize("value", ["abc", "Get-Thing", "42", "a.b", "C:\\temp"])
def test_plain_words_need_no_quotes(value):
    assert not needs_quoting(value)


@pytest.mark.parametrize("value", [
    "", "a b", "-Name", "$var", "#comment", "a,b", "a;b", "it's", 'say "hi"', "x`y", "(a)", "@x",
])
def test_special_values_need_quotes(value):
    assert needs_quoting(value)


def test_quote_doubles_single_quotes():
    assert quote("it's") == "'it''s'"
    assert quote("a\u2019b") == "'a\u2019\u2019b'"


def test_quoted_value_reads_back_as_one_literal():
    for value in ["a b", "it's", "-Name", "$x", "", "a\u2018b"]:
        tokens = tokenize(f"cmd {quote_if_needed(value)}")
        assert len(tokens) == 3
        assert tokens[1].value == value


def test_quote_if_needed_leaves_safe_values_alone():
    assert quote_if_needed("beta") == "beta"
    assert quote_if_needed("beta two") == "'beta two'"

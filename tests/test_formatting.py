import pytest

from ibooks_notes_exporter.formatting import (
    get_last_name,
    get_last_names,
    is_honorific,
    truncate_title,
)


@pytest.mark.parametrize("word", ["Dr.", "Jr.", "Mr,", "St.", "J."])
def test_honorifics(word):
    assert is_honorific(word)


@pytest.mark.parametrize("word", ["Smith", "dr.", "Doe", "Prof.", "Sr"])
def test_not_honorifics(word):
    assert not is_honorific(word)


def test_single_name():
    assert get_last_name("Jane Doe") == "(Doe)"


def test_honorific_suffix_is_skipped():
    assert get_last_name("Dr. John Smith Jr.") == "(Smith)"


def test_trailing_punctuation_is_stripped():
    assert get_last_name("Doe, Jane") == "(Jane)"
    assert get_last_name("Jane Doe,") == "(Doe)"
    assert get_last_name("Martin Luther King.") == "(King)"


def test_single_word_name():
    assert get_last_name("Plato") == "(Plato)"


def test_all_honorifics_gives_empty_parentheses():
    assert get_last_name("Dr. Jr.") == "()"
    assert get_last_name("") == "()"


def test_two_authors():
    assert get_last_names("Jane Doe & John Roe") == "(Doe) & (Roe)"


def test_three_authors():
    assert get_last_names("A B & C D & E F") == "(B) & (D) & (F)"


def test_four_authors_keep_order():
    names = "Erich Gamma & Richard Helm & Ralph Johnson & John Vlissides"
    assert get_last_names(names) == "(Gamma) & (Helm) & (Johnson) & (Vlissides)"


def test_only_literal_separator_splits():
    assert get_last_names("Jane Doe and John Roe") == "(Roe)"
    assert get_last_names("Jane Doe, John Roe") == "(Roe)"


def test_short_title_unchanged():
    title = "x" * 30
    assert truncate_title(title) == title
    assert truncate_title("Dune") == "Dune"


def test_long_title_truncated():
    title = "abcdefghij" * 3 + "klmno"
    assert len(title) == 35
    assert truncate_title(title) == "abcdefghij" * 3 + "..."


def test_truncation_counts_code_points():
    title = "é" * 31
    assert truncate_title(title) == "é" * 30 + "..."

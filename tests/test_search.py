import pytest

from pdf_navigator.library import DOCUMENT_START, InvalidPattern, search_body

BODY = "intro foo\n\n## H1\n\nfoo bar\n\n## H2\n\nbaz foo"


def test_matches_are_grouped_by_preceding_heading():
    groups = search_body(BODY, "foo")
    assert [g.section for g in groups] == [DOCUMENT_START, "H1", "H2"]
    assert all(len(g.matches) == 1 for g in groups)


def test_case_insensitive_by_default_and_keeps_original_text():
    groups = search_body("Foo FOO foo", "foo")
    assert [m.text for m in groups[0].matches] == ["Foo", "FOO", "foo"]

    groups = search_body("Foo FOO foo", "foo", case_sensitive=True)
    assert [m.text for m in groups[0].matches] == ["foo"]


def test_max_results_caps_total_matches():
    def total(groups):
        return sum(len(g.matches) for g in groups)

    assert total(search_body(BODY, "foo", max_results=2)) == 2
    assert total(search_body(BODY, "foo", max_results=10)) == 3
    with pytest.raises(ValueError):
        search_body(BODY, "foo", max_results=0)


def test_context_window_around_match():
    groups = search_body("0123456789foo0123456789", "foo", context_chars=3)
    assert groups[0].matches[0].context == "789foo012"


def test_literal_query_escapes_metacharacters():
    groups = search_body("abc a.c", "a.c")
    assert [m.text for m in groups[0].matches] == ["a.c"]

    groups = search_body("abc a.c", "a.c", regex=True)
    assert [m.text for m in groups[0].matches] == ["abc", "a.c"]


def test_zero_width_regex_terminates():
    groups = search_body("abcb", "(?=b)", regex=True)
    assert len(groups[0].matches) == 2

    groups = search_body("abc", "x*", regex=True)
    assert len(groups[0].matches) == 4


def test_invalid_regex_is_reported():
    with pytest.raises(InvalidPattern):
        search_body(BODY, "(", regex=True)


def test_no_matches_returns_empty_list():
    assert search_body(BODY, "missing") == []

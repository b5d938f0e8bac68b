from __future__ import annotations

import pytest

import lswatch


def _messages(classification) -> list[str]:
    return [d.message for d in classification.diagnostics]


@pytest.mark.parametrize(
    "token", ["--all", "--", "-", "", "file.txt", "--ignore=*.o", "l"]
)
def test_non_cluster_tokens_are_ignored(token: str):
    result = lswatch.classify_args(args=[token])

    assert result.observed == {}
    assert result.clusters == 0
    assert result.diagnostics == ()


def test_single_cluster_records_all_flags():
    result = lswatch.classify_args(args=["-la"])

    assert result.observed == {"l": "", "a": ""}
    assert result.clusters == 1
    assert result.diagnostics == ()


def test_separate_tokens_count_separately():
    result = lswatch.classify_args(args=["-l", "-a"])

    assert result.observed == {"l": "", "a": ""}
    assert result.clusters == 2


def test_value_option_consumes_next_token():
    result = lswatch.classify_args(args=["-I", "pattern"])

    assert result.observed == {"I": "pattern"}
    assert result.clusters == 1
    assert result.diagnostics == ()


def test_inline_value_matches_separate_value():
    inline = lswatch.classify_args(args=["-Ipattern"])
    separate = lswatch.classify_args(args=["-I", "pattern"])

    assert inline.observed == separate.observed == {"I": "pattern"}
    assert inline.clusters == 1


def test_consumed_value_is_not_scanned_as_cluster():
    # "-a" is the value of -I, not a flag.
    result = lswatch.classify_args(args=["-I", "-a", "-l"])

    assert result.observed == {"I": "-a", "l": ""}
    assert result.clusters == 2


def test_value_option_terminates_cluster():
    result = lswatch.classify_args(args=["-lIah"])

    assert result.observed == {"l": "", "I": "ah"}
    assert result.clusters == 1
    assert result.diagnostics == ()


def test_missing_value_is_reported_and_not_recorded():
    result = lswatch.classify_args(args=["-l", "-T"])

    assert result.observed == {"l": ""}
    assert result.clusters == 1
    assert _messages(result) == ["Missing value for argument: T"]


def test_unknown_option_is_reported():
    result = lswatch.classify_args(args=["-z"])

    assert result.observed == {}
    assert result.clusters == 0
    assert _messages(result) == ["Unknown argument: z"]


def test_unknown_option_does_not_stop_scan():
    result = lswatch.classify_args(args=["-zla"])

    assert result.observed == {"l": "", "a": ""}
    assert result.clusters == 1
    assert _messages(result) == ["Unknown argument: z"]


def test_duplicate_flag_is_reported_once_and_recorded_once():
    result = lswatch.classify_args(args=["-l", "-l"])

    assert result.observed == {"l": ""}
    assert result.clusters == 1
    assert _messages(result) == ["Duplicate argument: l"]


def test_duplicate_value_option_keeps_first_value():
    result = lswatch.classify_args(args=["-Ifoo", "-Ibar"])

    assert result.observed == {"I": "foo"}
    assert result.clusters == 1
    assert _messages(result) == ["Duplicate argument: I"]


def test_duplicate_value_option_does_not_consume_next_token():
    result = lswatch.classify_args(args=["-Ifoo", "-I", "-a"])

    assert result.observed == {"I": "foo", "a": ""}
    assert result.clusters == 2
    assert _messages(result) == ["Duplicate argument: I"]


def test_diagnostics_follow_scan_order():
    result = lswatch.classify_args(args=["-zl", "-l", "-yw"])

    assert _messages(result) == [
        "Unknown argument: z",
        "Duplicate argument: l",
        "Unknown argument: y",
        "Missing value for argument: w",
    ]
    assert result.clusters == 1


def test_long_options_are_skipped_between_clusters():
    result = lswatch.classify_args(args=["-l", "--color=auto", "-h"])

    assert result.observed == {"l": "", "h": ""}
    assert result.clusters == 2
    assert result.diagnostics == ()


def test_custom_catalog():
    catalog = lswatch.OptionCatalog(no_value=frozenset("xy"), value=frozenset("o"))
    result = lswatch.classify_args(args=["-x", "-o", "out", "-l"], catalog=catalog)

    assert result.observed == {"x": "", "o": "out"}
    assert _messages(result) == ["Unknown argument: l"]


def test_cursor_peek_and_take_next():
    cursor = lswatch.ArgCursor(["-I", "pat"])

    assert next(cursor) == "-I"
    assert cursor.peek() == "pat"
    assert cursor.take_next() == "pat"
    assert cursor.peek() is None
    assert cursor.take_next() is None
    assert list(cursor) == []

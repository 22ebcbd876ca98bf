import re

from refscan.analysis import (
    KEYWORDS,
    MAX_SYMBOLS_PER_LINE,
    LexicalSymbolExtractor,
    create_preview,
    escape_regexp,
    extract_symbols_from_line,
    find_hits,
    find_text_hits,
    find_word_hits,
)


def test_substring_hits_include_overlaps():
    assert find_text_hits("aaa", "aa") == [0, 1]
    assert find_text_hits("abcabc", "abc") == [0, 3]
    assert find_hits("aaaa", "aa", "substring") == [0, 1, 2]


def test_substring_hits_match_every_slice_offset():
    line = "xyxyxyx yxy"
    query = "xyx"
    expected = [i for i in range(len(line)) if line[i:i + len(query)] == query]
    assert find_text_hits(line, query) == expected


def test_word_hits_reject_matches_inside_identifiers():
    line = "concatenate cat catfish"
    assert find_word_hits(line, "cat") == [12]
    assert find_hits(line, "cat", "word") == [12]


def test_word_hits_find_identifier_boundary_matches_only():
    line = "foo fooBar barfoo foo"
    assert find_word_hits(line, "foo") == [0, line.rindex("foo")]


def test_word_boundary_treats_dollar_and_underscore_as_identifier_chars():
    assert find_word_hits("$foo _foo foo_ foo", "foo") == [15]


def test_matching_is_case_sensitive():
    assert find_text_hits("Foo foo FOO", "foo") == [4]
    assert find_word_hits("Foo foo FOO", "foo") == [4]


def test_empty_query_returns_no_hits():
    assert find_text_hits("anything", "") == []
    assert find_word_hits("anything", "") == []
    assert find_hits("anything", "", "word") == []


def test_escape_regexp_builds_literal_pattern():
    special = "a+b*c?^$()[]{}|."
    pattern = re.compile(escape_regexp(special))
    assert pattern.fullmatch(special)
    assert not pattern.search("aab*c?^$()[]{}|.")
    assert find_word_hits("x a.b axb", "a.b") == [2]


def test_create_preview_contains_hit():
    line = "0123456789abcdefghijABCDEFGHIJklmnopqrstuvwxyz"
    preview = create_preview(line, 12, 3)
    assert line[12:15] in preview
    assert preview == line


def test_create_preview_clips_to_forty_chars_each_side():
    line = "L" * 100 + "HIT" + "R" * 100
    preview = create_preview(line, 100, 3)
    assert preview == "L" * 40 + "HIT" + "R" * 40


def test_create_preview_tolerates_offsets_near_line_edges():
    line = "0123456789abcdefghijABCDEFGHIJklmnopqrstuvwxyz"
    assert create_preview(line, 0, 3).startswith("012")
    assert create_preview(line, len(line) - 1, 3).endswith("z")
    assert create_preview("ab", 5, 3) == "ab"
    assert create_preview("", 0, 3) == ""


def test_extract_symbols_skips_keywords_and_excluded_token():
    line = "const discountedPrice = calculateDiscount(totalPrice);"
    symbols = extract_symbols_from_line(line, "calculateDiscount")
    assert "discountedPrice" in symbols
    assert "totalPrice" in symbols
    assert "const" not in symbols
    assert "calculateDiscount" not in symbols


def test_extract_symbols_dedupes_in_first_seen_order():
    symbols = extract_symbols_from_line("b a b $c a _d 9e", "zzz")
    assert symbols == ["b", "a", "$c", "_d", "e"]


def test_extract_symbols_exclusion_is_case_sensitive():
    symbols = extract_symbols_from_line("Total total", "total")
    assert symbols == ["Total"]


def test_extract_symbols_caps_output():
    line = " ".join(f"name{i}" for i in range(50))
    symbols = extract_symbols_from_line(line, "")
    assert len(symbols) == MAX_SYMBOLS_PER_LINE
    assert symbols[0] == "name0"
    assert symbols[-1] == f"name{MAX_SYMBOLS_PER_LINE - 1}"


def test_keyword_only_line_yields_nothing():
    line = " ".join(sorted(KEYWORDS))
    assert extract_symbols_from_line(line, "") == []


def test_lexical_extractor_matches_function():
    line = "let x = y + zed;"
    assert LexicalSymbolExtractor().extract(line, "y") == extract_symbols_from_line(line, "y")

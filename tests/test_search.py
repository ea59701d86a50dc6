import os
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from devterm.entities import File
from devterm.search import (
    SearchOptions,
    compute_stats,
    format_search_results,
    search_files,
)

FILES = [
    File("src/a.ts", "typescript", "foo foo\nbar foo\nfoobar"),
    File("notes.md", "markdown", "FOO\nnothing here"),
    File("empty.md", "markdown", ""),
]
# case-insensitive literal "foo": 3 in a.ts lines 1-2, 1 in "foobar", 1 in notes.md
TOTAL = 5


@pytest.mark.parametrize("k", range(0, TOTAL + 3))
def test_results_are_bounded(k):
    results = search_files(FILES, "foo", max_results=k)
    assert len(results) == min(k, TOTAL)


def test_encounter_order_and_positions():
    results = search_files(FILES, "foo")
    assert [(r.file_path, r.line, r.column) for r in results] == [
        ("src/a.ts", 1, 1),
        ("src/a.ts", 1, 5),
        ("src/a.ts", 2, 5),
        ("src/a.ts", 3, 1),
        ("notes.md", 1, 1),
    ]
    assert results[1].context_after == "bar foo\nfoobar"
    assert results[0].context_before is None


def test_case_sensitive_and_whole_word():
    assert len(search_files(FILES, "foo", SearchOptions(case_sensitive=True))) == 4
    assert len(search_files(FILES, "foo", whole_word=True)) == 4
    assert search_files(FILES, "FOO", case_sensitive=True, whole_word=True)[0].file_path == "notes.md"


def test_literal_query_is_escaped():
    files = [File("x.ts", content="a.b axb")]
    assert [r.match for r in search_files(files, "a.b")] == ["a.b"]
    assert len(search_files(files, "a.b", regex=True)) == 2


def test_invalid_regex_yields_nothing():
    assert search_files(FILES, "(unclosed", regex=True) == []


def test_zero_length_match_does_not_loop():
    results = search_files(FILES, "x*", regex=True)
    # one empty match per non-empty line
    assert len(results) == 5
    assert all(r.match == "" for r in results)


def test_empty_query():
    assert search_files(FILES, "   ") == []


def test_format_groups_by_file():
    text = format_search_results(search_files(FILES, "foo", max_results=2), "foo")
    assert text.startswith('**2 result(s) for "foo"**')
    assert "### src/a.ts" in text
    assert "**foo**" in text
    assert format_search_results([], "zzz") == 'No results for "zzz".'


def test_compute_stats():
    stats = compute_stats([
        File("a.ts", content="import React from 'react'\n"),
        File("b.md", content="# Next.js notes"),
        File("c.md", content=""),
    ])
    assert stats.total_files == 3
    assert stats.files_by_extension == {"ts": 1, "md": 1}
    assert stats.total_lines == 3
    assert stats.technologies[:2] == ["TypeScript", "React"]
    assert "Next.js" in stats.technologies
    assert stats.file_types == ["TypeScript", "Markdown"]

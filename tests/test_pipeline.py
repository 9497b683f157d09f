from __future__ import annotations

import textwrap

from md_polish.config import PolishConfig
from md_polish.destination import parse_construct
from md_polish.pipeline import process, resolve_links_in_text, resolve_markdown_urls
from md_polish.scanner import scan_links

BASE_URL = "https://ex.com/p/"


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_relative_destinations_follow_reference_resolution():
    assert process("[x](/p/q)", "https://ex.com/x/y") == "[x](https://ex.com/p/q)"
    assert process("[x](../r)", "https://ex.com/x/y") == "[x](https://ex.com/r)"


def test_fragment_and_absolute_destinations_are_unchanged():
    source = "[a](#frag) [b](https://other.com/z) [c](mailto:me@ex.com)"

    assert process(source, "https://ex.com/x/y") == source


def test_escaped_parentheses_are_written_literally_after_resolution():
    assert process(r"[x](\(a\)b)", "https://ex.com/") == "[x](https://ex.com/(a)b)"


def test_unbalanced_parenthesis_stays_escaped():
    assert process(r"[x](a\)b)", "https://ex.com/") == r"[x](https://ex.com/a\)b)"


def test_escaped_space_keeps_title_separate():
    assert process(r'[x](a\ b "title")', "https://ex.com/") == r'[x](https://ex.com/a\ b "title")'


def test_bracketed_absolute_destination_is_unchanged():
    source = "[x](<https://ex.com/a b>)"
    (construct,) = scan_links(source)
    parsed = parse_construct(source, construct)

    assert parsed.url_text == "https://ex.com/a b"
    assert parsed.title_text is None
    assert process(source, "https://ex.com/") == source


def test_bracketed_relative_destination_keeps_literal_space():
    assert process("[a](<my file.md>)", BASE_URL) == "[a](<https://ex.com/p/my file.md>)"


def test_apostrophe_in_destination_is_not_a_title():
    source = "[x](https://ex.com/a'b \"t\")"
    (construct,) = scan_links(source)
    parsed = parse_construct(source, construct)

    assert parsed.url_text == "https://ex.com/a'b"
    assert parsed.title_text == "t"
    assert process(source, BASE_URL) == source


def test_title_after_tab_is_kept():
    assert process("[a](b\t'c')", BASE_URL) == "[a](https://ex.com/p/b\t'c')"


def test_balanced_parentheses_in_destination():
    assert process("[a](x(y)z)", BASE_URL) == "[a](https://ex.com/p/x(y)z)"


def test_badge_image_inside_link_is_resolved_with_its_link():
    source = "[![build](img/badge.svg)](docs/)"

    assert process(source, BASE_URL) == (
        "[![build](https://ex.com/p/img/badge.svg)](https://ex.com/p/docs/)"
    )


def test_inline_code_is_not_rewritten():
    source = "`[a](b)` and [c](d)"

    assert process(source, BASE_URL) == "`[a](b)` and [c](https://ex.com/p/d)"


def test_malformed_links_pass_through():
    for source in ("[a](b", "[a] (b)", "[a](x(y)", r"\[a](b)", "[ref]: ./x", "[a]()"):
        assert process(source, BASE_URL) == source


def test_fenced_code_is_untouched():
    source = _dedent(
        """
        ```markdown
        [a](b)
        | keep   | this |
        |---|---|
        ```
        [c](d)
        """
    )
    expected = _dedent(
        """
        ```markdown
        [a](b)
        | keep   | this |
        |---|---|
        ```
        [c](https://ex.com/p/d)
        """
    )

    assert process(source, BASE_URL) == expected


def test_unterminated_fence_protects_the_rest_of_the_document():
    source = "[a](b)\n~~~\n[c](d)\n| x  |\n|---|\n"

    assert process(source, BASE_URL) == "[a](https://ex.com/p/b)\n~~~\n[c](d)\n| x  |\n|---|\n"


def test_table_compaction_matches_documented_example():
    source = "| a   |  bb |\n|----|----|\n"
    fenced = f"```\n{source}```\n"
    config = PolishConfig(min_separator_dashes=3)

    assert process(source, BASE_URL, config) == "| a | bb |\n| --- | --- |\n"
    assert process(fenced, BASE_URL, config) == fenced


def test_link_inside_table_cell_is_resolved_and_compacted():
    source = "| [a](b)   | c |\n|---|---|\n"

    assert process(source, BASE_URL) == "| [a](https://ex.com/p/b) | c |\n| - | - |\n"


def test_line_endings_and_trailing_newline_are_preserved():
    source = "[a](b)\r\n| x  |\r\n|--|\r\n"

    assert process(source, BASE_URL) == "[a](https://ex.com/p/b)\r\n| x |\r\n| - |\r\n"
    assert process("[a](b)", BASE_URL) == "[a](https://ex.com/p/b)"


def test_passes_can_be_disabled():
    source = "[a](b)\n\n| x  |\n|---|\n"

    assert process(source, BASE_URL, PolishConfig(resolve_urls=False)) == (
        "[a](b)\n\n| x |\n| - |\n"
    )
    assert process(source, BASE_URL, PolishConfig(compact_tables=False)) == (
        "[a](https://ex.com/p/b)\n\n| x  |\n|---|\n"
    )


def test_relative_base_leaves_links_unchanged():
    source = "[a](b) ![c](d.png)"

    assert process(source, "not a url") == source
    assert process(source, "") == source


def test_empty_document():
    assert process("", BASE_URL) == ""


def test_process_is_idempotent_on_a_converted_page():
    source = _dedent(
        r"""
        # Guide

        [![ci](badges/ci.svg)](actions/) See [the docs](../docs/index.html "Docs").

        ![diagram](<images/flow chart.png>) and [escaped](a\ b\(1\).md).

        | Name      | Link          |
        | :-------- | ------------: |
        | one       | [1](one.md)   |

        ```python
        print("[not](a link)")
        ```
        """
    )

    once = process(source, BASE_URL)

    assert process(once, BASE_URL) == once
    assert "[![ci](https://ex.com/p/badges/ci.svg)](https://ex.com/p/actions/)" in once
    assert '[the docs](https://ex.com/docs/index.html "Docs")' in once
    assert "![diagram](<https://ex.com/p/images/flow chart.png>)" in once
    assert r"[escaped](https://ex.com/p/a\ b(1).md)" in once
    assert "| one | [1](https://ex.com/p/one.md) |" in once
    assert "| :- | -: |" in once
    assert 'print("[not](a link)")' in once


def test_resolve_markdown_urls_leaves_tables_alone():
    source = "| [a](b)   | c |\n|---|---|\n"

    assert resolve_markdown_urls(source, BASE_URL) == "| [a](https://ex.com/p/b)   | c |\n|---|---|\n"


def test_resolve_links_in_text_returns_input_when_nothing_changes():
    source = "plain text with [a](https://ex.com/) only"

    assert resolve_links_in_text(source, BASE_URL) is source


def test_links_after_closing_fence_are_resolved():
    source = "```\ncode\n```\nSee [a](/p) and ```y```\n"

    assert process(source, "https://ex.com/x/y") == (
        "```\ncode\n```\nSee [a](https://ex.com/p) and ```y```\n"
    )


def test_links_between_fences_are_resolved():
    source = "```\na\n```\n[b](c) text\n[d](e)\n````\n[f](g)\n````\n"

    assert process(source, BASE_URL) == (
        "```\na\n```\n[b](https://ex.com/p/c) text\n[d](https://ex.com/p/e)\n````\n[f](g)\n````\n"
    )


def test_file_base_url_resolves_links():
    assert process("[a](/p)", "file:///tmp/x") == "[a](file:///p)"

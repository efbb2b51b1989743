"""Tests for front matter extraction."""

import logging

from svmd.transform import frontmatter
from svmd.transform.frontmatter import extract_frontmatter


def test_no_header_returns_text_unchanged():
    text = "# Title\n\nBody text."
    assert extract_frontmatter(text) == ({}, text)


def test_header_must_start_the_file():
    text = "\n---\ntitle: Late\n---\nBody"
    metadata, body = extract_frontmatter(text)
    assert metadata == {}
    assert body == text


def test_basic_header():
    metadata, body = extract_frontmatter("---\ntitle: Hi\nauthor: 'Ann Lee'\n---\n# Body\n")
    assert metadata == {"title": "Hi", "author": "Ann Lee"}
    assert body == "# Body\n"


def test_keys_keep_source_order():
    metadata, _ = extract_frontmatter("---\nzeta: 1\nalpha: 2\nmid: 3\n---\n")
    assert list(metadata) == ["zeta", "alpha", "mid"]


def test_comments_blank_lines_and_lines_without_colon_are_skipped():
    text = "---\n# a comment\n\njust words\n: no key\nurl: http://example.com:8080/a\n---\nbody"
    metadata, body = extract_frontmatter(text)
    assert metadata == {"url": "http://example.com:8080/a"}
    assert body == "body"


def test_only_matching_quotes_are_stripped():
    metadata, _ = extract_frontmatter("---\na: \"double\"\nb: 'single'\nc: \"mixed'\nd: \"\n---\n")
    assert metadata == {"a": "double", "b": "single", "c": "\"mixed'", "d": '"'}


def test_header_at_end_of_file():
    metadata, body = extract_frontmatter("---\ntitle: Only\n---")
    assert metadata == {"title": "Only"}
    assert body == ""


def test_crlf_line_endings():
    metadata, body = extract_frontmatter("---\r\ntitle: Win\r\n---\r\nBody\r\n")
    assert metadata == {"title": "Win"}
    assert body == "Body\r\n"


def test_parsing_is_idempotent():
    _, body = extract_frontmatter("---\ntitle: Hi\n---\n# Hello\n\ntext")
    metadata, again = extract_frontmatter(body)
    assert metadata == {}
    assert again == body


def test_parse_failure_is_logged_and_ignored(monkeypatch, caplog):
    def broken(header):
        raise RuntimeError("boom")

    monkeypatch.setattr(frontmatter, "_parse_header", broken)
    text = "---\ntitle: Hi\n---\nBody"
    with caplog.at_level(logging.WARNING, logger="svmd.transform.frontmatter"):
        metadata, body = extract_frontmatter(text)
    assert metadata == {}
    assert body == text
    assert "Failed to parse front matter" in caplog.text

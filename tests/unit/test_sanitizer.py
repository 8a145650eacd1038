"""Tests for slug and text sanitizers."""

import pytest

from taxonomy_importer.core.sanitizer import (
    remove_accents,
    sanitize_text_field,
    sanitize_title,
    strip_tags,
)


class TestSanitizeTitle:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Technology", "technology"),
            ("Web Development!", "web-development"),
            ("web-dev", "web-dev"),
            ("Café Ñu", "cafe-nu"),
            ("  --a.b--  ", "a-b"),
            ("Design & UX", "design-ux"),
            ("snake_case ok", "snake_case-ok"),
            ("<em>Bold</em> move", "bold-move"),
            ("100%20sure", "100sure"),
            ("Tom &amp; Jerry", "tom-jerry"),
            ("!!!", ""),
        ],
    )
    def test_sanitize_title(self, text, expected):
        assert sanitize_title(text) == expected

    def test_output_is_ascii_lowercase(self):
        slug = sanitize_title("Ärger ÜBER Straße")

        assert slug == slug.lower()
        assert slug.isascii()
        assert "--" not in slug


class TestSanitizeTextField:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Tech related posts", "Tech related posts"),
            ("  padded  ", "padded"),
            ("<p>Hello <b>world</b></p>", "Hello world"),
            ("line one\nline two\ttab", "line one line two tab"),
            ("a%0Ab", "ab"),
            ("bell\x07 char", "bell char"),
            ("<script>alert(1)</script>Safe", "Safe"),
            ("Café au lait", "Café au lait"),
        ],
    )
    def test_sanitize_text_field(self, text, expected):
        assert sanitize_text_field(text) == expected


def test_strip_tags_keeps_text():
    assert strip_tags("<a href='x'>link</a> text") == "link text"


def test_strip_tags_drops_style_blocks():
    assert strip_tags("<style>p {color: red}</style>kept") == "kept"


def test_remove_accents():
    assert remove_accents("Crème Brûlée") == "Creme Brulee"

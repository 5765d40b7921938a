import pytest

from ctrxml2json.models.schemas import AmpersandPolicy
from ctrxml2json.utils.sanitizer import sanitize_text


def test_plain_text_is_only_trimmed():
    assert sanitize_text("  <a>hello world</a>  ") == "<a>hello world</a>"


def test_line_breaks_and_tabs_are_deleted_not_spaced():
    assert sanitize_text("<a>\nfoo\tbar\r\n</a>") == "<a>foobar</a>"


def test_repeated_spaces_collapse():
    assert sanitize_text("<a>x   \n   y</a>") == "<a>x y</a>"


@pytest.mark.parametrize("raw", [
    "a\x00\x01b",
    "a\x0bb",
    "a\U0001F600b",
    "a\ufffeb",
    "a \x02 b",
])
def test_illegal_code_points_become_one_space(raw):
    assert sanitize_text(raw) == "a b"


def test_legal_non_ascii_is_kept():
    assert sanitize_text("<a>café µg</a>") == "<a>café µg</a>"


def test_apostrophe_is_escaped_twice_by_legacy_policy():
    assert sanitize_text("<a>it's</a>") == "<a>it  &amp;apos;s</a>"


def test_apostrophe_with_preserved_entities():
    result = sanitize_text("<a>it's</a>", AmpersandPolicy.PRESERVE_ENTITIES)
    assert result == "<a>it &apos;s</a>"


def test_legacy_policy_double_escapes_existing_entities():
    assert sanitize_text("<a>x &amp; y</a>") == "<a>x  &amp;amp; y</a>"


def test_bare_ampersand_is_escaped():
    assert sanitize_text("<a>A&B</a>") == "<a>A &amp;B</a>"


def test_preserve_entities_keeps_references():
    text = "<a>x &amp; y &#169; &#xA9; A&B</a>"
    assert sanitize_text(text, "preserve-entities") == "<a>x &amp; y &#169; &#xA9; A &amp;B</a>"


def test_double_quotes_become_single_quotes():
    assert sanitize_text('<a b="c">say "hi"</a>') == "<a b='c'>say 'hi'</a>"


def test_trim_happens_between_escapes():
    assert sanitize_text("'x'") == "&amp;apos;x  &amp;apos;"


@pytest.mark.parametrize("raw", [
    "<a>it's</a>",
    '<a b="1">R&D "quoted" &amp; &lt;</a>',
    "'&\"'&\"",
    "&&&",
])
def test_no_raw_quotes_or_ampersands_remain(raw):
    result = sanitize_text(raw)
    assert '"' not in result
    assert all(result.startswith("amp;", i + 1) for i, char in enumerate(result) if char == "&")


def test_apostrophes_only_come_from_double_quotes():
    assert "'" not in sanitize_text("<a>it's R&D</a> 'quoted'")

import pytest

from frontmatter import parse_frontmatter, parse_scalar_value


@pytest.mark.parametrize("text", [
    "# Just a heading\n\nSome text.",
    "",
    "\n---\ntitle: late\n---\nbody",
    " ---\ntitle: indented\n---\n",
    "--- not a fence\ntitle: x\n---\n",
])
def test_text_without_leading_block_is_returned_unchanged(text: str) -> None:
    metadata, body = parse_frontmatter(text)
    assert metadata == {}
    assert body == text


def test_parses_scalar_quoted_and_array_values() -> None:
    text = (
        "---\n"
        'title: "web/SQL Injection Basics"\n'
        "subtitle: 'A short intro'\n"
        "date: 2024-03-01\n"
        'tags: ["web", \'sqli\', hard]\n'
        "---\n"
        "\n"
        "Body starts here.\n"
    )

    metadata, body = parse_frontmatter(text)

    assert metadata == {
        "title": "web/SQL Injection Basics",
        "subtitle": "A short intro",
        "date": "2024-03-01",
        "tags": ["web", "sqli", "hard"],
    }
    assert body == "Body starts here."


def test_value_keeps_everything_after_first_colon() -> None:
    metadata, _ = parse_frontmatter("---\nsource: https://example.com:8443/x\n---\nbody")
    assert metadata["source"] == "https://example.com:8443/x"


def test_empty_keys_and_colonless_lines_are_skipped() -> None:
    metadata, body = parse_frontmatter("---\n: orphan\n\njust words\ntitle: Ok\n---\nbody")
    assert metadata == {"title": "Ok"}
    assert body == "body"


def test_duplicate_keys_keep_last_value() -> None:
    metadata, _ = parse_frontmatter("---\ntitle: First\ntitle: Second\n---\n")
    assert metadata == {"title": "Second"}


def test_empty_block_yields_empty_metadata_and_stripped_body() -> None:
    metadata, body = parse_frontmatter("---\n---\n\n  Hello\n")
    assert metadata == {}
    assert body == "Hello"


def test_crlf_line_endings_are_supported() -> None:
    metadata, body = parse_frontmatter("---\r\ntitle: Windows\r\n---\r\nBody\r\n")
    assert metadata == {"title": "Windows"}
    assert body == "Body"


def test_unknown_keys_are_preserved() -> None:
    metadata, _ = parse_frontmatter("---\ntitle: T\nauthor: someone\n---\n")
    assert metadata["author"] == "someone"


@pytest.mark.parametrize("raw, expected", [
    ("  plain  ", "plain"),
    ('"quoted"', "quoted"),
    ("'single'", "single"),
    ("\"mismatched'", "\"mismatched'"),
    ('"', '"'),
    ("[a, b , c]", ["a", "b", "c"]),
    ("[\"x\", 'y']", ["x", "y"]),
    ("[]", []),
    ('"[one, two]"', ["one", "two"]),
])
def test_parse_scalar_value(raw: str, expected: object) -> None:
    assert parse_scalar_value(raw) == expected

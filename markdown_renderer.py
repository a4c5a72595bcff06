"""Minimal Markdown -> HTML renderer for writeup bodies.

Supports the subset the site needs: fenced code blocks, `#`-`####` headers,
single-line blockquotes, unordered/ordered lists, paragraphs and inline
code/bold/italic. Anything else falls through as paragraph text.

Order of passes matters:
  1. fenced code blocks are swapped for placeholders before line scanning,
  2. lines are grouped into blocks by a small state machine,
  3. inline code is protected before bold, bold runs before italic,
  4. code block placeholders are restored last.
"""

from __future__ import annotations

import enum
import re

_FENCE_RE = re.compile(r"```(?:\w*\n)?(.*?)```", re.DOTALL)
_HEADER_RE = re.compile(r"^(#{1,4})\s+(.*)")
_BLOCKQUOTE_RE = re.compile(r"^>\s+")
_UNORDERED_RE = re.compile(r"^[-*]\s+")
_ORDERED_RE = re.compile(r"^\d+\.\s+")

_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
_BOLD_RES = (re.compile(r"\*\*([^*]+)\*\*"), re.compile(r"__([^_]+)__"))
_ITALIC_RES = (re.compile(r"\*([^*]+)\*"), re.compile(r"_([^_]+)_"))

# NUL-delimited so no Markdown rule can match inside a placeholder.
_BLOCK_TOKEN = "\x00CODEBLOCK{}\x00"
_BLOCK_TOKEN_RE = re.compile(r"\x00CODEBLOCK(\d+)\x00")
_INLINE_TOKEN = "\x00CODESPAN{}\x00"
_INLINE_TOKEN_RE = re.compile(r"\x00CODESPAN(\d+)\x00")


class BlockState(enum.Enum):
    """Which block container the renderer currently has open."""

    NONE = "none"
    PARAGRAPH = "paragraph"
    UNORDERED_LIST = "unordered_list"
    ORDERED_LIST = "ordered_list"
    BLOCKQUOTE = "blockquote"


_LIST_TAGS = {
    BlockState.UNORDERED_LIST: "ul",
    BlockState.ORDERED_LIST: "ol",
}


def escape_code(text: str) -> str:
    """Escape angle brackets so code renders as text, never as markup."""
    return text.replace("<", "&lt;").replace(">", "&gt;")


def _restore(saved: list[str], match: re.Match[str]) -> str:
    index = int(match.group(1))
    return saved[index] if index < len(saved) else match.group(0)


def format_inline(text: str) -> str:
    """Apply inline code, bold and italic formatting to one line of text."""
    spans: list[str] = []

    def _protect(match: re.Match[str]) -> str:
        spans.append(f"<code>{escape_code(match.group(1))}</code>")
        return _INLINE_TOKEN.format(len(spans) - 1)

    text = _INLINE_CODE_RE.sub(_protect, text)
    for pattern in _BOLD_RES:
        text = pattern.sub(r"<strong>\1</strong>", text)
    for pattern in _ITALIC_RES:
        text = pattern.sub(r"<em>\1</em>", text)

    return _INLINE_TOKEN_RE.sub(lambda m: _restore(spans, m), text)


class _BlockWriter:
    """Line-by-line block grouping with one explicit state variable."""

    def __init__(self) -> None:
        self.state = BlockState.NONE
        self.output: list[str] = []
        self._paragraph: list[str] = []

    def close(self) -> None:
        """Close whatever container is open and return to NONE."""
        if self.state is BlockState.PARAGRAPH:
            self.output.append(f"<p>{' '.join(self._paragraph)}</p>")
            self._paragraph = []
        elif self.state in _LIST_TAGS:
            self.output.append(f"</{_LIST_TAGS[self.state]}>")
        self.state = BlockState.NONE

    def header(self, level: int, text: str) -> None:
        self.close()
        self.output.append(f"<h{level}>{format_inline(text)}</h{level}>")

    def raw(self, line: str) -> None:
        self.close()
        self.output.append(line)

    def blockquote(self, text: str) -> None:
        self.close()
        self.output.append(f"<blockquote>{format_inline(text)}</blockquote>")
        self.state = BlockState.BLOCKQUOTE

    def list_item(self, kind: BlockState, text: str) -> None:
        if self.state is not kind:
            self.close()
            self.output.append(f"<{_LIST_TAGS[kind]}>")
            self.state = kind
        self.output.append(f"<li>{format_inline(text)}</li>")

    def text(self, line: str) -> None:
        if self.state is not BlockState.PARAGRAPH:
            self.close()
            self.state = BlockState.PARAGRAPH
        formatted = format_inline(line.strip())
        if formatted:
            self._paragraph.append(formatted)


def render_markdown(markdown: str) -> str:
    """Render a Markdown body into an HTML fragment.

    Never raises on malformed input: every container opened here is closed
    before returning, and code content is always escaped.
    """
    blocks: list[str] = []

    def _preserve(match: re.Match[str]) -> str:
        blocks.append(f"<pre><code>{escape_code(match.group(1).strip())}</code></pre>")
        return _BLOCK_TOKEN.format(len(blocks) - 1)

    # Placeholders are NUL-delimited; NUL bytes from the source are dropped.
    source = markdown.replace("\r\n", "\n").replace("\x00", "")
    processed = _FENCE_RE.sub(_preserve, source)
    writer = _BlockWriter()

    for line in processed.split("\n"):
        header = _HEADER_RE.match(line)
        if header:
            writer.header(len(header.group(1)), header.group(2))
        elif _BLOCK_TOKEN_RE.search(line):
            writer.raw(line)
        elif _BLOCKQUOTE_RE.match(line):
            writer.blockquote(_BLOCKQUOTE_RE.sub("", line, count=1))
        elif _UNORDERED_RE.match(line):
            writer.list_item(BlockState.UNORDERED_LIST, _UNORDERED_RE.sub("", line, count=1))
        elif _ORDERED_RE.match(line):
            writer.list_item(BlockState.ORDERED_LIST, _ORDERED_RE.sub("", line, count=1))
        elif not line.strip():
            writer.close()
        else:
            writer.text(line)

    writer.close()
    html = "\n".join(writer.output)

    return _BLOCK_TOKEN_RE.sub(lambda m: _restore(blocks, m), html)

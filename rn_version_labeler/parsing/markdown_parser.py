# rn_version_labeler/parsing/markdown_parser.py

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from rn_version_labeler.models.section import Section, SectionKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_markdown() -> MarkdownIt:
    # CommonMark plus GitHub-style tables, which show up in issue templates.
    return MarkdownIt("commonmark").enable("table")


_md = _build_markdown()


def _inline_text(tokens: Sequence[Token], idx: int) -> str:
    """Return the raw inline source of the token following an *_open token."""
    if idx < len(tokens) and tokens[idx].type == "inline":
        return tokens[idx].content.strip()
    return ""


def _skip_container(tokens: Sequence[Token], start: int) -> int:
    """
    Given the index of a container *_open token, return the index just past
    its matching *_close token.
    """
    opener = tokens[start]
    close_type = opener.type[: -len("_open")] + "_close"
    depth = 0
    for idx in range(start, len(tokens)):
        tok = tokens[idx]
        if tok.type == opener.type:
            depth += 1
        elif tok.type == close_type:
            depth -= 1
            if depth == 0:
                return idx + 1
    # Unbalanced stream: consume the rest.
    return len(tokens)


def _container_text(tokens: Sequence[Token], start: int, end: int) -> str:
    """Join the text of every inline and code token between start and end."""
    parts = [
        tok.content.strip("\n")
        for tok in tokens[start:end]
        if tok.type in ("inline", "fence", "code_block") and tok.content
    ]
    return "\n".join(parts).strip()


def _blank_line_follows(tokens: Sequence[Token], block: Token, next_idx: int) -> bool:
    """True when one or more blank lines separate `block` from the next block."""
    if block.map is None or next_idx >= len(tokens):
        return False
    nxt = tokens[next_idx].map
    return nxt is not None and nxt[0] > block.map[1]


def _fold_tokens(tokens: Sequence[Token]) -> List[Section]:
    sections: List[Section] = []
    i = 0
    n = len(tokens)

    while i < n:
        tok = tokens[i]

        if tok.type == "heading_open":
            # Headings swallow the blank lines after them.
            level = int(tok.tag[1:]) if tok.tag[1:].isdigit() else None
            sections.append(
                Section(SectionKind.HEADING, _inline_text(tokens, i + 1), level=level)
            )
            i += 3
        elif tok.type == "paragraph_open":
            sections.append(Section(SectionKind.PARAGRAPH, _inline_text(tokens, i + 1)))
            i += 3
            if _blank_line_follows(tokens, tok, i):
                sections.append(Section(SectionKind.OTHER))
        elif tok.type in ("fence", "code_block"):
            sections.append(Section(SectionKind.CODE, tok.content.rstrip("\n")))
            i += 1
            if tok.type == "fence" and _blank_line_follows(tokens, tok, i):
                sections.append(Section(SectionKind.OTHER))
        elif tok.type == "html_block":
            sections.append(Section(SectionKind.OTHER, tok.content.strip()))
            i += 1
        elif tok.type == "blockquote_open":
            end = _skip_container(tokens, i)
            sections.append(Section(SectionKind.OTHER, _container_text(tokens, i + 1, end)))
            i = end
        elif tok.nesting == 1:
            # Lists and tables: keep the slot, drop the contents.
            sections.append(Section(SectionKind.OTHER))
            i = _skip_container(tokens, i)
        elif tok.nesting == 0:
            # hr and any other leaf block without text of its own
            sections.append(Section(SectionKind.OTHER))
            i += 1
        else:
            # Stray closing token; nothing to emit.
            i += 1

    return sections


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_sections(text: Optional[str]) -> List[Section]:
    """
    Split a markdown document into block-level sections, in document order.

    Headings absorb the blank lines after them, so a heading is directly
    followed by the block written under it. Blank lines after a paragraph or
    a fenced code block become a textless OTHER section, so such blocks are
    not adjacent to what comes after the gap. Block quotes carry the text
    they contain; lists, tables and thematic breaks are kept as textless
    OTHER sections so positions stay meaningful.

    Malformed input never raises: at worst an empty list is returned.
    """
    if not text:
        return []

    try:
        tokens = _md.parse(text)
    except Exception:
        logger.exception("Failed to tokenize markdown; treating body as empty")
        return []

    return _fold_tokens(tokens)

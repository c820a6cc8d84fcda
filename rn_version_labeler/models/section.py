# rn_version_labeler/models/section.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SectionKind(str, Enum):
    """
    Block-level kinds the markdown parser distinguishes.

    OTHER covers everything structural (lists, quotes, rules, raw HTML).
    """
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE = "code"
    OTHER = "other"


@dataclass(frozen=True)
class Section:
    """
    One block of an issue body, in document order.

    Attributes:
        kind: What sort of block this is.
        text: Rendered text of the block; empty for purely structural blocks.
        level: Heading level (1-6) for headings, None otherwise.
    """
    kind: SectionKind
    text: str = ""
    level: Optional[int] = None

    @property
    def has_text(self) -> bool:
        return bool(self.text)

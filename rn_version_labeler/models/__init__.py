# rn_version_labeler/models/__init__.py

from .section import Section, SectionKind

__all__ = ["Section", "SectionKind"]

# rn_version_labeler/parsing/__init__.py

from .markdown_parser import parse_sections

__all__ = ["parse_sections"]

# rn_version_labeler/extraction/__init__.py

from .versioning import parse_semver
from .version_extractor import extract_version, extract_version_from_body

__all__ = ["parse_semver", "extract_version", "extract_version_from_body"]

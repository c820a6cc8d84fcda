# rn_version_labeler/extraction/version_extractor.py

from __future__ import annotations

import re
from typing import Optional, Sequence

from rn_version_labeler.extraction.versioning import parse_semver
from rn_version_labeler.models.section import Section
from rn_version_labeler.parsing.markdown_parser import parse_sections

# Headings under which the reporter states the version directly.
VERSION_HEADINGS = ("Version", "New Version")

# Heading above pasted `react-native info` output.
RN_INFO_HEADING = "Output of `react-native info`"

# First "react-native: <version> =>" entry in the pasted output.
RN_INFO_VERSION_RE = re.compile(r"react-native:(.+?)=>")


def _following_text(sections: Sequence[Section], idx: int) -> Optional[str]:
    nxt = idx + 1
    if nxt >= len(sections) or not sections[nxt].has_text:
        return None
    return sections[nxt].text


def _version_from_rn_info(output: str) -> Optional[str]:
    match = RN_INFO_VERSION_RE.search(output)
    if match is None:
        return None
    return parse_semver(match.group(1).strip())


def extract_version(sections: Sequence[Section]) -> str:
    """
    Scan sections in order and return the first version found, or "".

    A "Version" / "New Version" heading takes the block right after it as
    the version. An "Output of `react-native info`" heading takes the block
    after it as tool output and pulls the react-native entry out of it.
    When the block after a heading is missing or does not yield a valid
    version, scanning carries on with the next section.
    """
    for idx, section in enumerate(sections):
        if not section.has_text:
            continue

        if section.text in VERSION_HEADINGS:
            candidate = _following_text(sections, idx)
            if candidate is None:
                continue
            version = parse_semver(candidate)
        elif section.text == RN_INFO_HEADING:
            output = _following_text(sections, idx)
            if output is None:
                continue
            version = _version_from_rn_info(output)
        else:
            continue

        if version:
            return version

    return ""


def extract_version_from_body(body: Optional[str]) -> str:
    """Parse an issue body and extract its version ("" when there is none)."""
    return extract_version(parse_sections(body))

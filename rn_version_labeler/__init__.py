# rn_version_labeler/__init__.py

"""
Detect the React Native version an issue reports and keep the issue's
"Version: x.y.z" label in sync with it.
"""

from rn_version_labeler.extraction import extract_version, extract_version_from_body, parse_semver
from rn_version_labeler.labels import LabelPlan, label_for_version, plan_label_changes
from rn_version_labeler.parsing import parse_sections

__version__ = "0.1.0"

__all__ = [
    "extract_version",
    "extract_version_from_body",
    "parse_semver",
    "LabelPlan",
    "label_for_version",
    "plan_label_changes",
    "parse_sections",
]

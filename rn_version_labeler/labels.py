# rn_version_labeler/labels.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

VERSION_LABEL_PREFIX = "Version: "
NO_VERSION_LABEL = "Version: unspecified"


@dataclass(frozen=True)
class LabelPlan:
    """
    Label mutations needed to bring an issue in line with its version.

    Attributes:
        target: The version label the issue should carry.
        removals: Version labels to take off, in the order they appear on the issue.
        needs_addition: True when the target label is not on the issue yet.
    """
    target: str
    removals: Tuple[str, ...] = ()
    needs_addition: bool = False

    @property
    def is_noop(self) -> bool:
        return not self.removals and not self.needs_addition


def label_for_version(version: str) -> str:
    """Label encoding *version*, or the "unspecified" label when it is empty."""
    return f"{VERSION_LABEL_PREFIX}{version}" if version else NO_VERSION_LABEL


def is_version_label(label: str) -> bool:
    return label.startswith(VERSION_LABEL_PREFIX)


def plan_label_changes(version: str, current_labels: Iterable[str]) -> LabelPlan:
    """
    Work out which version labels to drop and whether to add the target.

    Every version label other than the target is removed, however many
    there are, so at most one version label survives.
    """
    target = label_for_version(version)
    current = list(current_labels)

    removals: List[str] = []
    for name in current:
        if is_version_label(name) and name != target and name not in removals:
            removals.append(name)

    return LabelPlan(
        target=target,
        removals=tuple(removals),
        needs_addition=target not in current,
    )

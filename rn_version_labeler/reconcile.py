# rn_version_labeler/reconcile.py

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from rn_version_labeler.extraction.version_extractor import extract_version_from_body
from rn_version_labeler.github_client import IssueTracker, TrackerError
from rn_version_labeler.labels import LabelPlan, plan_label_changes

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Result types
# -----------------------------------------------------------------------------


class ReconcileStatus(str, Enum):
    SKIPPED = "skipped"
    APPLIED = "applied"
    PARTIAL_FAILURE = "partial_failure"


class SkipReason(str, Enum):
    ISSUE_CLOSED = "issue closed"
    NO_BODY = "no description provided"
    MISSING_REQUIRED_LABEL = "missing required label"


@dataclass
class MutationOutcome:
    """
    What happened to one label mutation.

    `skipped` is set when the mutation was deliberately not attempted
    (target label not defined in the repository, or a dry run).
    """
    action: str  # "remove" | "add"
    label: str
    ok: bool
    error: Optional[str] = None
    skipped: bool = False


@dataclass
class ReconcileResult:
    status: ReconcileStatus
    reason: Optional[SkipReason] = None
    version: str = ""
    plan: Optional[LabelPlan] = None
    outcomes: List[MutationOutcome] = field(default_factory=list)

    @property
    def failures(self) -> List[MutationOutcome]:
        return [o for o in self.outcomes if not o.ok and not o.skipped]


# -----------------------------------------------------------------------------
# Mutation helpers
# -----------------------------------------------------------------------------


def _remove_one(
    tracker: IssueTracker, owner: str, repo: str, number: int, name: str
) -> MutationOutcome:
    try:
        tracker.remove_label(owner, repo, number, name)
    except TrackerError as exc:
        logger.error("Failed to remove label %r: %s", name, exc)
        return MutationOutcome("remove", name, ok=False, error=str(exc))
    return MutationOutcome("remove", name, ok=True)


def _remove_all(
    tracker: IssueTracker,
    owner: str,
    repo: str,
    number: int,
    names: List[str],
    max_workers: int,
) -> List[MutationOutcome]:
    """
    Issue every removal in parallel and wait for all of them.

    A failed removal never stops the others; outcomes keep input order.
    """
    if not names:
        return []
    workers = max(1, min(max_workers, len(names)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(_remove_one, tracker, owner, repo, number, name)
            for name in names
        ]
        return [f.result() for f in futures]


def _add_target(
    tracker: IssueTracker, owner: str, repo: str, number: int, name: str
) -> MutationOutcome:
    try:
        if not tracker.label_exists(owner, repo, name):
            logger.warning("Label %s doesn't seem to exist", name)
            return MutationOutcome(
                "add", name, ok=False, error="label not defined in repository", skipped=True
            )
        tracker.add_label(owner, repo, number, name)
    except TrackerError as exc:
        logger.warning("Failed to add label %r: %s", name, exc)
        return MutationOutcome("add", name, ok=False, error=str(exc))
    return MutationOutcome("add", name, ok=True)


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def reconcile_issue(
    tracker: IssueTracker,
    owner: str,
    repo: str,
    number: int,
    required_label: str,
    *,
    max_workers: int = 4,
    dry_run: bool = False,
) -> ReconcileResult:
    """
    Bring an issue's version label in line with the version in its body.

    Closed issues, issues without a body and issues not carrying
    `required_label` are left untouched. Otherwise stale version labels are
    removed (in parallel) and the target label is added if the repository
    defines it. Errors from the initial reads propagate; errors from label
    mutations are collected in the result.
    """
    issue = tracker.get_issue(owner, repo, number)

    if issue.is_closed:
        logger.info("Issue %s/%s#%s already closed", owner, repo, number)
        return ReconcileResult(ReconcileStatus.SKIPPED, reason=SkipReason.ISSUE_CLOSED)

    if not issue.body:
        logger.info("Issue %s/%s#%s has no description", owner, repo, number)
        return ReconcileResult(ReconcileStatus.SKIPPED, reason=SkipReason.NO_BODY)

    version = extract_version_from_body(issue.body)
    logger.info("Version found in issue body: %s", version or "<none>")

    labels = tracker.list_labels(owner, repo, number)
    if required_label not in labels:
        logger.info("Issue not tagged with %s", required_label)
        return ReconcileResult(
            ReconcileStatus.SKIPPED,
            reason=SkipReason.MISSING_REQUIRED_LABEL,
            version=version,
        )

    plan = plan_label_changes(version, labels)
    result = ReconcileResult(ReconcileStatus.APPLIED, version=version, plan=plan)

    if dry_run:
        result.outcomes.extend(
            MutationOutcome("remove", name, ok=False, skipped=True) for name in plan.removals
        )
        if plan.needs_addition:
            result.outcomes.append(MutationOutcome("add", plan.target, ok=False, skipped=True))
        return result

    result.outcomes.extend(
        _remove_all(tracker, owner, repo, number, list(plan.removals), max_workers)
    )

    if plan.needs_addition:
        result.outcomes.append(_add_target(tracker, owner, repo, number, plan.target))

    if result.failures:
        result.status = ReconcileStatus.PARTIAL_FAILURE
    return result

# tests/test_labels.py

from rn_version_labeler.labels import (
    NO_VERSION_LABEL,
    VERSION_LABEL_PREFIX,
    is_version_label,
    label_for_version,
    plan_label_changes,
)


def test_label_for_version():
    assert label_for_version("2.0.0") == VERSION_LABEL_PREFIX + "2.0.0" == "Version: 2.0.0"
    assert label_for_version("") == NO_VERSION_LABEL == "Version: unspecified"


def test_is_version_label():
    assert is_version_label("Version: 0.71.0")
    assert is_version_label(NO_VERSION_LABEL)
    assert not is_version_label("Version 0.71.0")
    assert not is_version_label("Needs: Triage")


def test_plan_removes_every_other_version_label():
    plan = plan_label_changes(
        "0.72.0",
        ["Needs: Triage", "Version: 0.71.0", "Version: unspecified", "Version: 0.72.0"],
    )

    assert plan.target == "Version: 0.72.0"
    assert plan.removals == ("Version: 0.71.0", "Version: unspecified")
    assert plan.needs_addition is False


def test_plan_adds_missing_target():
    plan = plan_label_changes("0.72.0", ["Needs: Triage"])

    assert plan.removals == ()
    assert plan.needs_addition is True
    assert not plan.is_noop


def test_plan_without_version_targets_sentinel():
    plan = plan_label_changes("", ["Version: 0.70.0"])

    assert plan.target == NO_VERSION_LABEL
    assert plan.removals == ("Version: 0.70.0",)
    assert plan.needs_addition is True


def test_plan_is_noop_when_labels_already_match():
    plan = plan_label_changes("1.5.0", ["bug", "Version: 1.5.0"])

    assert plan.is_noop


def test_plan_deduplicates_removals():
    plan = plan_label_changes("1.0.0", ["Version: 0.9.0", "Version: 0.9.0"])

    assert plan.removals == ("Version: 0.9.0",)

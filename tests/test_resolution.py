"""Tests for applying conflict resolutions to a store."""
from datetime import date

import pytest

from hearth_calendar.core import UnresolvedConflictsError, apply, require_all_resolved
from hearth_calendar.domain import (
    CandidateEvent,
    Conflict,
    Create,
    ResolutionAction,
    Skip,
    Update,
    parse_resolution,
)

from conftest import FakeStore, make_template


def conflict(index, existing_id):
    return Conflict(
        candidate_index=index,
        candidate=CandidateEvent(title=f"Upload {index}", start_date=date(2024, 1, 10), category="sports"),
        existing=make_template(existing_id),
        match_score=80,
        match_reasons=("Same title",),
    )


@pytest.fixture
def conflicts():
    return [conflict(0, "e1"), conflict(1, "e2"), conflict(2, "e3")]


@pytest.fixture
def store():
    return FakeStore(templates=[make_template("e1"), make_template("e2"), make_template("e3")])


class TestApply:
    """Test cases for batch resolution."""

    def test_failed_update_is_isolated(self, conflicts, store):
        store.fail_updates = True
        resolutions = {0: Skip(), 1: Create(), 2: Update("e3")}

        result = apply(conflicts, resolutions, store)

        assert (result.skipped, result.created, result.updated, result.failed) == (1, 1, 0, 1)
        assert len(result.failures) == 1
        assert result.failures[0].index == 2
        assert result.failures[0].message == "update rejected by store"
        assert [item.title for item in store.inserted] == ["Upload 1"]

    def test_counts_add_up_to_resolved_conflicts(self, conflicts, store):
        result = apply(conflicts, {0: Update("e1"), 1: Update("e2"), 2: Skip()}, store)
        assert result.created + result.updated + result.skipped + result.failed == len(conflicts)
        assert [event_id for event_id, _ in store.updated] == ["e1", "e2"]

    def test_update_writes_candidate_fields(self, conflicts, store):
        apply(conflicts[:1], {0: Update("e1")}, store)
        event_id, fields = store.updated[0]
        assert event_id == "e1"
        assert fields.title == "Upload 0"

    def test_missing_resolution_is_reported(self, conflicts, store):
        result = apply(conflicts, {0: Skip(), 2: Create()}, store)
        assert result.unresolved == [1]
        assert result.skipped == 1
        assert result.created == 1
        assert store.updated == []

    def test_unknown_existing_record_fails_with_key_name(self, conflicts, store):
        result = apply(conflicts[:1], {0: Update("gone")}, store)
        assert result.failed == 1
        assert "gone" in result.failures[0].message

    def test_every_failure_is_reported(self, conflicts, store):
        store.fail_inserts = True
        result = apply(conflicts, {0: Create(), 1: Create(), 2: Create()}, store)
        assert result.failed == 3
        assert [item.index for item in result.failures] == [0, 1, 2]

    def test_as_dict(self, conflicts, store):
        store.fail_updates = True
        payload = apply(conflicts, {0: Skip(), 1: Create(), 2: Update("e3")}, store).as_dict()
        assert payload == {
            "created": 1,
            "updated": 0,
            "skipped": 1,
            "failed": 1,
            "failures": [{"index": 2, "message": "update rejected by store"}],
            "unresolved": [],
        }

    def test_empty_batch(self, store):
        result = apply([], {}, store)
        assert result.as_dict()["failed"] == 0


class TestResolutionChoices:
    """Test cases for validating and parsing resolution choices."""

    def test_require_all_resolved_lists_missing_positions(self, conflicts):
        with pytest.raises(UnresolvedConflictsError) as excinfo:
            require_all_resolved(conflicts, {1: Skip()})
        assert excinfo.value.missing == [0, 2]

    def test_require_all_resolved_passes(self, conflicts):
        require_all_resolved(conflicts, {0: Skip(), 1: Skip(), 2: Skip()})

    def test_update_targets_the_matched_event(self, conflicts):
        resolution = parse_resolution("update", conflicts[2])
        assert resolution == Update(existing_id="e3")
        assert resolution.action is ResolutionAction.UPDATE

    def test_skip_and_create(self, conflicts):
        assert isinstance(parse_resolution("skip", conflicts[0]), Skip)
        assert isinstance(parse_resolution(ResolutionAction.CREATE, conflicts[0]), Create)

    def test_unknown_choice_is_rejected(self, conflicts):
        with pytest.raises(ValueError, match="Unknown resolution"):
            parse_resolution("merge", conflicts[0])

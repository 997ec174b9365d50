"""Tests for the appointment status state machine."""
from datetime import datetime, timedelta

import pytest

from vetclinic.models import AppointmentStatus as S
from vetclinic.services.errors import InvalidTransition, RecordRequired
from vetclinic.services.record_type_service import RecordType
from vetclinic.services.status_service import (
    can_delete, check_transition, display_status, is_allowed, is_missed_candidate,
)

ALL = (S.PENDING, S.SCHEDULED, S.COMPLETED, S.MISSED)
ALLOWED = {
    (S.PENDING, S.SCHEDULED),
    (S.SCHEDULED, S.COMPLETED),
    (S.SCHEDULED, S.MISSED),
    (S.COMPLETED, S.SCHEDULED),
    (S.MISSED, S.SCHEDULED),
}


class TestTransitions:
    def test_table_matches_allowed_pairs(self):
        for current in ALL:
            for target in ALL:
                assert is_allowed(current, target) == ((current, target) in ALLOWED)

    @pytest.mark.parametrize('current, target', [
        (S.PENDING, S.COMPLETED),
        (S.PENDING, S.MISSED),
        (S.COMPLETED, S.MISSED),
        (S.SCHEDULED, S.SCHEDULED),
        (S.SCHEDULED, 'archived'),
    ])
    def test_disallowed_pairs_raise(self, current, target):
        with pytest.raises(InvalidTransition) as excinfo:
            check_transition(current, target)
        assert excinfo.value.code == 'invalid-transition'

    def test_completion_needs_the_record(self):
        with pytest.raises(RecordRequired) as excinfo:
            check_transition(S.SCHEDULED, S.COMPLETED, RecordType.DEWORMING, record_exists=False)

        assert excinfo.value.to_dict()['record_type'] == RecordType.DEWORMING
        assert excinfo.value.code == 'record-required'

    def test_completion_with_record_passes(self):
        check_transition(S.SCHEDULED, S.COMPLETED, RecordType.DEWORMING, record_exists=True)

    def test_completion_without_required_record_passes(self):
        check_transition(S.SCHEDULED, S.COMPLETED, RecordType.NONE)

    def test_record_only_matters_for_completion(self):
        check_transition(S.SCHEDULED, S.MISSED, RecordType.VACCINATION, record_exists=False)


class TestMissedRule:
    now = datetime(2026, 10, 19, 10, 0)

    def test_past_scheduled_reads_as_missed(self):
        past = self.now - timedelta(minutes=1)

        assert is_missed_candidate(S.SCHEDULED, past, self.now)
        assert display_status(S.SCHEDULED, past, self.now) == S.MISSED

    def test_other_statuses_are_left_alone(self):
        past = self.now - timedelta(days=1)

        assert display_status(S.PENDING, past, self.now) == S.PENDING
        assert display_status(S.COMPLETED, past, self.now) == S.COMPLETED

    def test_future_scheduled_stays_scheduled(self):
        assert display_status(S.SCHEDULED, self.now + timedelta(hours=1), self.now) == S.SCHEDULED
        assert not is_missed_candidate(S.SCHEDULED, self.now, self.now)


def test_only_completed_cannot_be_deleted():
    assert [status for status in ALL if not can_delete(status)] == [S.COMPLETED]

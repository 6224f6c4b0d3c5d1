from __future__ import annotations

from datetime import date

import pytest

from src.student_affairs.student_affairs.academic.follow_up import (
    FollowUpService,
    InMemoryAcknowledgmentStore,
    JsonFileAcknowledgmentStore,
)
from src.student_affairs.student_affairs.academic.model import AcademicAbsence
from src.student_affairs.student_affairs.core.exceptions import NotFoundError
from src.student_affairs.student_affairs.entities.model import ClassRoom, Course, Student
from src.student_affairs.student_affairs.recap.join import LookupTables, join_academic
from tests.fakes import FakeAcademicRepo


def test_json_store_persists_ids(tmp_path):
    path = tmp_path / "nested" / "confirmed.json"
    store = JsonFileAcknowledgmentStore(path)

    store.add(5)
    store.add(7)
    store.discard(5)

    reopened = JsonFileAcknowledgmentStore(path)
    assert reopened.ids() == {7}
    assert reopened.has(7)
    assert not reopened.has(5)


def test_json_store_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / "confirmed.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileAcknowledgmentStore(path)

    assert store.ids() == set()
    store.add(1)
    assert store.ids() == {1}


@pytest.fixture()
def academic():
    return FakeAcademicRepo(
        absences=[
            AcademicAbsence(1, 1, date(2025, 1, 10), 1),
            AcademicAbsence(2, 1, date(2025, 1, 11), 1),
        ]
    )


def _records(academic):
    lookups = LookupTables.build([Student(1, "Aisha", class_id=10)], [ClassRoom(10, "7A")], [Course(1, "Math")])
    return join_academic([], academic.list_absences(), lookups)


def test_confirm_hides_absence_from_pending(academic):
    svc = FollowUpService(academic, InMemoryAcknowledgmentStore())

    assert [r.source_id for r in svc.pending(_records(academic))] == [2, 1]
    svc.confirm(2)
    assert [r.source_id for r in svc.pending(_records(academic))] == [1]


def test_delete_absence_also_forgets_acknowledgment(academic):
    store = InMemoryAcknowledgmentStore([1])
    svc = FollowUpService(academic, store)

    svc.delete_absence(1)

    assert 1 not in academic.absences
    assert not store.has(1)
    with pytest.raises(NotFoundError):
        svc.delete_absence(1)

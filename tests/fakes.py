"""In-memory repositories shared by the service and controller tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from src.student_affairs.student_affairs.academic.model import AcademicAbsence, AcademicPermission
from src.student_affairs.student_affairs.core.exceptions import DataAccessError
from src.student_affairs.student_affairs.dormitory.model import CeremonyAbsence, DormitoryPermission, PrayerAbsence
from src.student_affairs.student_affairs.entities.model import Course, Profile, Student

NOW = datetime(2025, 3, 10, 12, 0, 0)


def _in_range(day, start, end):
    return (start is None or day >= start) and (end is None or day <= end)


class FakeNamedRepo:
    def __init__(self, table, factory, items=()):
        self.table = table
        self._factory = factory
        self._items = {i.id: i for i in items}
        self._next_id = max(self._items, default=0) + 1
        self.fail = False

    def list_all(self):
        if self.fail:
            raise DataAccessError(f"Failed to read {self.table}: boom")
        return sorted(self._items.values(), key=lambda i: i.name)

    def get_by_id(self, entity_id):
        return self._items.get(int(entity_id))

    def insert_many(self, names):
        for name in names:
            self._items[self._next_id] = self._factory(id=self._next_id, name=name)
            self._next_id += 1
        return len(names)

    def rename(self, entity_id, name):
        item = self._items.get(int(entity_id))
        if not item:
            return False
        self._items[item.id] = replace(item, name=name)
        return True

    def delete_by_id(self, entity_id):
        return self._items.pop(int(entity_id), None) is not None


class FakeStudentRepo:
    def __init__(self, students=()):
        self._items = {s.id: s for s in students}
        self._next_id = max(self._items, default=0) + 1
        self.fail = False

    def list_all(self):
        if self.fail:
            raise DataAccessError("Failed to read students: boom")
        return sorted(self._items.values(), key=lambda s: s.name)

    def list_with_class(self):
        return [s for s in self.list_all() if s.class_id is not None]

    def list_with_dormitory(self):
        return [s for s in self.list_all() if s.dormitory_id is not None]

    def list_by_group(self, *, class_id=None, dormitory_id=None):
        return [
            s
            for s in self.list_all()
            if (class_id is None or s.class_id == class_id) and (dormitory_id is None or s.dormitory_id == dormitory_id)
        ]

    def get_by_id(self, student_id):
        return self._items.get(int(student_id))

    def insert_many(self, names, *, class_id, dormitory_id):
        for name in names:
            self._items[self._next_id] = Student(self._next_id, name, class_id, dormitory_id)
            self._next_id += 1
        return len(names)

    def update(self, student_id, values):
        student = self._items.get(int(student_id))
        if not student:
            return False
        self._items[student.id] = replace(student, **values)
        return True

    def delete_by_id(self, student_id):
        return self._items.pop(int(student_id), None) is not None


class FakeProfileRepo:
    def __init__(self, profiles=()):
        self._items = {p.id: p for p in profiles}

    def list_all(self):
        return sorted(self._items.values(), key=lambda p: p.username)

    def list_created_since(self, moment):
        return [p for p in self._items.values() if p.created_at and p.created_at >= moment]

    def get_by_id(self, profile_id):
        return self._items.get(int(profile_id))

    def update_role(self, profile_id, role):
        profile = self._items.get(int(profile_id))
        if not profile:
            return False
        self._items[profile.id] = replace(profile, role=role)
        return True

    def delete_by_id(self, profile_id):
        return self._items.pop(int(profile_id), None) is not None


class FakeAcademicRepo:
    def __init__(self, permissions=(), absences=()):
        self.permissions = {p.id: p for p in permissions}
        self.absences = {a.id: a for a in absences}
        self._next_id = max([*self.permissions, *self.absences], default=0) + 1
        self.fail = False

    def _id(self):
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def list_permissions(self, *, period=None, start=None, end=None, student_id=None, type=None):
        if self.fail:
            raise DataAccessError("Failed to read academic_permissions: boom")
        return [
            p
            for p in self.permissions.values()
            if _in_range(p.date, start, end)
            and (student_id is None or p.student_id == student_id)
            and (type is None or p.type == type)
            and (period is None or p.academic_year in (None, period.academic_year))
        ]

    def list_absences(self, *, period=None, start=None, end=None, student_id=None, course_id=None):
        return [
            a
            for a in self.absences.values()
            if _in_range(a.date, start, end)
            and (student_id is None or a.student_id == student_id)
            and (course_id is None or a.course_id == course_id)
            and (period is None or a.academic_year in (None, period.academic_year))
        ]

    def list_permissions_created_since(self, moment):
        return [p for p in self.permissions.values() if p.created_at and p.created_at >= moment]

    def list_absences_created_since(self, moment):
        return [a for a in self.absences.values() if a.created_at and a.created_at >= moment]

    def count_permissions(self, *, start, end):
        return len(self.list_permissions(start=start, end=end))

    def count_absences(self, *, start, end):
        return len(self.list_absences(start=start, end=end))

    def insert_permission(self, *, student_id, date, type, reason, period):
        new_id = self._id()
        self.permissions[new_id] = AcademicPermission(
            new_id, student_id, date, type, reason, period.academic_year, period.semester, NOW
        )
        return new_id

    def insert_absences(self, *, student_id, date, course_ids, period):
        for course_id in course_ids:
            new_id = self._id()
            self.absences[new_id] = AcademicAbsence(
                new_id, student_id, date, course_id, period.academic_year, period.semester, NOW
            )
        return len(course_ids)

    def delete_permission(self, permission_id):
        return self.permissions.pop(int(permission_id), None) is not None

    def delete_absence(self, absence_id):
        return self.absences.pop(int(absence_id), None) is not None


class FakeDormitoryRepo:
    def __init__(self, permissions=(), prayer=(), ceremony=()):
        self.permissions = {p.id: p for p in permissions}
        self.prayer = {a.id: a for a in prayer}
        self.ceremony = {a.id: a for a in ceremony}
        self._next_id = max([*self.permissions, *self.prayer, *self.ceremony], default=0) + 1
        self.insert_calls = 0

    def _id(self):
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def list_permissions(self, *, period, type=None, student_id=None, start=None, end=None):
        return [
            p
            for p in self.permissions.values()
            if (p.academic_year, p.semester) == (period.academic_year, period.semester)
            and (type is None or p.type == type)
            and (student_id is None or p.student_id == student_id)
            and _in_range(p.date, start, end)
        ]

    def count_permissions(self, *, start, end, student_id=None, type=None):
        return sum(
            1
            for p in self.permissions.values()
            if _in_range(p.date, start, end)
            and (student_id is None or p.student_id == student_id)
            and (type is None or p.type == type)
        )

    def list_prayer_absences(self, *, period, start=None, end=None):
        return [a for a in self.prayer.values() if _in_range(a.date, start, end)]

    def list_ceremony_absences(self, *, period, start=None, end=None):
        return [a for a in self.ceremony.values() if _in_range(a.date, start, end)]

    def count_absences(self, *, start, end):
        return len(self.list_prayer_absences(period=None, start=start, end=end)) + len(
            self.list_ceremony_absences(period=None, start=start, end=end)
        )

    def list_permissions_created_since(self, moment):
        return [p for p in self.permissions.values() if p.created_at and p.created_at >= moment]

    def list_prayer_absences_created_since(self, moment):
        return [a for a in self.prayer.values() if a.created_at and a.created_at >= moment]

    def list_ceremony_absences_created_since(self, moment):
        return [a for a in self.ceremony.values() if a.created_at and a.created_at >= moment]

    def insert_permissions(self, rows, *, period):
        self.insert_calls += 1
        for r in rows:
            new_id = self._id()
            self.permissions[new_id] = DormitoryPermission(
                id=new_id,
                student_id=r["student_id"],
                date=r["date"],
                type=r["type"],
                number_of_days=r["number_of_days"],
                reason=r.get("reason"),
                academic_year=period.academic_year,
                semester=period.semester,
                created_at=NOW,
            )
        return len(rows)

    def insert_prayer_absences(self, *, student_ids, date, prayer, status, period):
        self.insert_calls += 1
        for s in student_ids:
            new_id = self._id()
            self.prayer[new_id] = PrayerAbsence(new_id, s, date, prayer, status, NOW)
        return len(student_ids)

    def insert_ceremony_absences(self, *, student_ids, date, status, period):
        self.insert_calls += 1
        for s in student_ids:
            new_id = self._id()
            self.ceremony[new_id] = CeremonyAbsence(new_id, s, date, status, NOW)
        return len(student_ids)

    def delete_permission(self, permission_id):
        return self.permissions.pop(int(permission_id), None) is not None

    def delete_prayer_absence(self, absence_id):
        return self.prayer.pop(int(absence_id), None) is not None

    def delete_ceremony_absence(self, absence_id):
        return self.ceremony.pop(int(absence_id), None) is not None


def course_repo(*names):
    return FakeNamedRepo("courses", Course, [Course(i, n) for i, n in enumerate(names, start=1)])


def profile(pid, username, role, created_at=None):
    return Profile(pid, username, role, created_at)

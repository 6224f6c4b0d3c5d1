from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence, TypeVar

from ..core.enums import Role
from ..database.query import MySQLTableGateway, TableQuery
from .model import ClassRoom, Course, Dormitory, Profile, Student
from .repository import NamedEntityRepository, ProfileRepository, StudentRepository

T = TypeVar("T")


class MySQLNamedEntityRepository(NamedEntityRepository[T]):
    def __init__(self, gateway: MySQLTableGateway, table: str, factory: Callable[..., T]):
        self._gateway = gateway
        self.table = table
        self._factory = factory

    def _to_model(self, r: dict) -> T:
        return self._factory(id=int(r["id"]), name=r["name"])

    def list_all(self) -> Sequence[T]:
        rows = self._gateway.fetch(TableQuery(self.table, ("id", "name")).order_by("name"))
        return [self._to_model(r) for r in rows]

    def get_by_id(self, entity_id: int) -> Optional[T]:
        r = self._gateway.fetch_one(TableQuery(self.table, ("id", "name")).eq("id", int(entity_id)))
        return self._to_model(r) if r else None

    def insert_many(self, names: Sequence[str]) -> int:
        return self._gateway.insert_many(self.table, [{"name": n} for n in names])

    def rename(self, entity_id: int, name: str) -> bool:
        return self._gateway.update_by_id(self.table, entity_id, {"name": name})

    def delete_by_id(self, entity_id: int) -> bool:
        return self._gateway.delete_by_id(self.table, entity_id)


def class_repository(gateway: MySQLTableGateway) -> MySQLNamedEntityRepository[ClassRoom]:
    return MySQLNamedEntityRepository(gateway, "classes", ClassRoom)


def dormitory_repository(gateway: MySQLTableGateway) -> MySQLNamedEntityRepository[Dormitory]:
    return MySQLNamedEntityRepository(gateway, "dormitories", Dormitory)


def course_repository(gateway: MySQLTableGateway) -> MySQLNamedEntityRepository[Course]:
    return MySQLNamedEntityRepository(gateway, "courses", Course)


def _optional_int(value) -> Optional[int]:
    return int(value) if value is not None else None


class MySQLStudentRepository(StudentRepository):
    _COLUMNS = ("id", "name", "class_id", "dormitory_id")

    def __init__(self, gateway: MySQLTableGateway):
        self._gateway = gateway

    def _query(self) -> TableQuery:
        return TableQuery("students", self._COLUMNS)

    @staticmethod
    def _to_model(r: dict) -> Student:
        return Student(
            id=int(r["id"]),
            name=r["name"],
            class_id=_optional_int(r.get("class_id")),
            dormitory_id=_optional_int(r.get("dormitory_id")),
        )

    def _list(self, query: TableQuery) -> Sequence[Student]:
        return [self._to_model(r) for r in self._gateway.fetch(query.order_by("name"))]

    def list_all(self) -> Sequence[Student]:
        return self._list(self._query())

    def list_with_class(self) -> Sequence[Student]:
        return self._list(self._query().not_null("class_id"))

    def list_with_dormitory(self) -> Sequence[Student]:
        return self._list(self._query().not_null("dormitory_id"))

    def list_by_group(self, *, class_id: Optional[int] = None, dormitory_id: Optional[int] = None) -> Sequence[Student]:
        query = self._query()
        if class_id is not None:
            query.eq("class_id", int(class_id))
        if dormitory_id is not None:
            query.eq("dormitory_id", int(dormitory_id))
        return self._list(query)

    def get_by_id(self, student_id: int) -> Optional[Student]:
        r = self._gateway.fetch_one(self._query().eq("id", int(student_id)))
        return self._to_model(r) if r else None

    def insert_many(self, names: Sequence[str], *, class_id: Optional[int], dormitory_id: Optional[int]) -> int:
        rows = [{"name": n, "class_id": class_id, "dormitory_id": dormitory_id} for n in names]
        return self._gateway.insert_many("students", rows)

    def update(self, student_id: int, values: dict) -> bool:
        return self._gateway.update_by_id("students", student_id, values)

    def delete_by_id(self, student_id: int) -> bool:
        return self._gateway.delete_by_id("students", student_id)


class MySQLProfileRepository(ProfileRepository):
    _COLUMNS = ("id", "username", "role", "created_at")

    def __init__(self, gateway: MySQLTableGateway):
        self._gateway = gateway

    @staticmethod
    def _to_model(r: dict) -> Profile:
        return Profile(id=int(r["id"]), username=r["username"], role=Role(r["role"]), created_at=r.get("created_at"))

    def list_all(self) -> Sequence[Profile]:
        rows = self._gateway.fetch(TableQuery("profiles", self._COLUMNS).order_by("username"))
        return [self._to_model(r) for r in rows]

    def list_created_since(self, moment: datetime) -> Sequence[Profile]:
        rows = self._gateway.fetch(TableQuery("profiles", self._COLUMNS).created_since(moment))
        return [self._to_model(r) for r in rows]

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        r = self._gateway.fetch_one(TableQuery("profiles", self._COLUMNS).eq("id", int(profile_id)))
        return self._to_model(r) if r else None

    def update_role(self, profile_id: int, role: Role) -> bool:
        return self._gateway.update_by_id("profiles", profile_id, {"role": role.value})

    def delete_by_id(self, profile_id: int) -> bool:
        return self._gateway.delete_by_id("profiles", profile_id)

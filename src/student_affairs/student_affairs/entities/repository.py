from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, TypeVar

from ..core.enums import Role
from .model import Profile, Student

T = TypeVar("T")


class NamedEntityRepository(Protocol[T]):
    """Classes, dormitories and courses: rows with just an id and a name."""

    table: str

    def list_all(self) -> Sequence[T]:
        raise NotImplementedError

    def get_by_id(self, entity_id: int) -> Optional[T]:
        raise NotImplementedError

    def insert_many(self, names: Sequence[str]) -> int:
        raise NotImplementedError

    def rename(self, entity_id: int, name: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, entity_id: int) -> bool:
        raise NotImplementedError


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_with_class(self) -> Sequence[Student]:
        """Only students that have a class (class_id IS NOT NULL)."""

        raise NotImplementedError

    def list_with_dormitory(self) -> Sequence[Student]:
        """Only students that live in a dormitory (dormitory_id IS NOT NULL)."""

        raise NotImplementedError

    def list_by_group(self, *, class_id: Optional[int] = None, dormitory_id: Optional[int] = None) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def insert_many(self, names: Sequence[str], *, class_id: Optional[int], dormitory_id: Optional[int]) -> int:
        raise NotImplementedError

    def update(self, student_id: int, values: dict) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError


class ProfileRepository(Protocol):
    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def list_created_since(self, moment: datetime) -> Sequence[Profile]:
        raise NotImplementedError

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def update_role(self, profile_id: int, role: Role) -> bool:
        raise NotImplementedError

    def delete_by_id(self, profile_id: int) -> bool:
        raise NotImplementedError

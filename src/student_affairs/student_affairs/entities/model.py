from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Student:
    """A student belongs to at most one class and at most one dormitory."""

    id: int
    name: str
    class_id: Optional[int] = None
    dormitory_id: Optional[int] = None


@dataclass(frozen=True)
class ClassRoom:
    id: int
    name: str


@dataclass(frozen=True)
class Dormitory:
    id: int
    name: str


@dataclass(frozen=True)
class Course:
    id: int
    name: str


@dataclass(frozen=True)
class Profile:
    id: int
    username: str
    role: Role
    created_at: Optional[datetime] = None

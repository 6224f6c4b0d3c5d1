from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from ..common.validators import parse_name_lines, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .repository import NamedEntityRepository, ProfileRepository, StudentRepository

logger = logging.getLogger(__name__)

GROUP_KINDS = ("classes", "dormitories", "courses")


class EntityAdminService:
    """Use case: super admin manages classes, dormitories, courses and students."""

    def __init__(self, groups: Dict[str, NamedEntityRepository], students: StudentRepository):
        unknown = set(groups) - set(GROUP_KINDS)
        if unknown:
            raise ValueError(f"Unsupported entity kinds: {sorted(unknown)}")
        self._groups = groups
        self._students = students

    def _repo(self, kind: str) -> NamedEntityRepository:
        repo = self._groups.get(kind)
        if repo is None:
            raise ValidationError(f"Unknown entity kind: {kind}")
        return repo

    def list(self, kind: str, *, class_id: Optional[int] = None, dormitory_id: Optional[int] = None) -> Sequence:
        if kind == "students":
            if class_id is None and dormitory_id is None:
                return self._students.list_all()
            return self._students.list_by_group(class_id=class_id, dormitory_id=dormitory_id)
        return self._repo(kind).list_all()

    def add_from_text(self, kind: str, text: str) -> int:
        """Bulk add: one name per line, blank lines ignored."""
        repo = self._repo(kind)
        names = parse_name_lines(text, kind)
        count = repo.insert_many(names)
        logger.info("Added %s rows to %s", count, kind)
        return count

    def add_students_from_text(
        self,
        text: str,
        *,
        class_id: Optional[int] = None,
        dormitory_id: Optional[int] = None,
    ) -> int:
        names = parse_name_lines(text, "students")
        if class_id is not None and not self._repo("classes").get_by_id(int(class_id)):
            raise ValidationError("Selected class does not exist")
        if dormitory_id is not None and not self._repo("dormitories").get_by_id(int(dormitory_id)):
            raise ValidationError("Selected dormitory does not exist")

        count = self._students.insert_many(names, class_id=class_id, dormitory_id=dormitory_id)
        logger.info("Added %s students (class=%s, dormitory=%s)", count, class_id, dormitory_id)
        return count

    def rename(self, kind: str, entity_id: int, name: str) -> None:
        name = require_non_empty(name, "Name")
        if kind == "students":
            if not self._students.get_by_id(entity_id):
                raise NotFoundError("Student not found")
            self._students.update(entity_id, {"name": name})
            logger.info("Renamed student id=%s", entity_id)
            return

        repo = self._repo(kind)
        if not repo.get_by_id(entity_id):
            raise NotFoundError(f"{kind} row not found")
        repo.rename(entity_id, name)
        logger.info("Renamed %s id=%s", kind, entity_id)

    def assign_student(self, student_id: int, *, class_id: Optional[int], dormitory_id: Optional[int]) -> None:
        """Move a student between classes/dormitories; ``None`` clears the link."""
        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")
        if class_id is not None and not self._repo("classes").get_by_id(int(class_id)):
            raise ValidationError("Selected class does not exist")
        if dormitory_id is not None and not self._repo("dormitories").get_by_id(int(dormitory_id)):
            raise ValidationError("Selected dormitory does not exist")
        self._students.update(student_id, {"class_id": class_id, "dormitory_id": dormitory_id})
        logger.info("Assigned student id=%s to class=%s dormitory=%s", student_id, class_id, dormitory_id)

    def delete(self, kind: str, entity_id: int) -> None:
        repo = self._students if kind == "students" else self._repo(kind)
        if not repo.delete_by_id(entity_id):
            raise NotFoundError(f"{kind} row not found")
        logger.info("Deleted %s id=%s", kind, entity_id)


class ProfileService:
    """Use case: super admin manages profile roles.

    Account creation itself belongs to the external auth provider.
    """

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def list_profiles(self):
        return self._profiles.list_all()

    def change_role(self, *, current_role: Role, current_profile_id: Optional[int], profile_id: int, role: Role) -> None:
        if current_role != Role.SUPER_ADMIN:
            raise AuthorizationError("You do not have permission")
        if current_profile_id is not None and int(current_profile_id) == int(profile_id) and role != Role.SUPER_ADMIN:
            raise ValidationError("You cannot remove your own super admin role")

        if not self._profiles.get_by_id(profile_id):
            raise NotFoundError("Profile not found")
        self._profiles.update_role(profile_id, role)
        logger.info("Changed role of profile id=%s to %s", profile_id, role.value)

    def delete_profile(self, *, current_role: Role, current_profile_id: Optional[int], profile_id: int) -> None:
        if current_role != Role.SUPER_ADMIN:
            raise AuthorizationError("You do not have permission")
        if current_profile_id is not None and int(current_profile_id) == int(profile_id):
            raise ValidationError("You cannot delete your own profile")

        if not self._profiles.delete_by_id(profile_id):
            raise NotFoundError("Profile not found")
        logger.info("Deleted profile id=%s", profile_id)

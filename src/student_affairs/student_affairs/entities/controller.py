from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.http import current_profile_id, current_role, json_body, ok, roles_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .service import GROUP_KINDS

ENTITY_KINDS = GROUP_KINDS + ("students",)


def _kind(kind: str) -> str:
    if kind not in ENTITY_KINDS:
        raise ValidationError(f"Unknown entity kind: {kind}")
    return kind


def _optional_id(value):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Id must be a whole number")


def _profile_dict(p) -> dict:
    return {
        "id": p.id,
        "username": p.username,
        "role": p.role.value,
        "created_at": p.created_at.isoformat() if p.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/profiles", methods=["GET"], endpoint="admin_profiles")
    @roles_required(Role.SUPER_ADMIN)
    def admin_profiles():
        return ok([_profile_dict(p) for p in container.profile_service.list_profiles()])

    @app.route("/api/admin/profiles/<int:profile_id>/role", methods=["PUT"], endpoint="admin_profile_role")
    @roles_required(Role.SUPER_ADMIN)
    def admin_profile_role(profile_id: int):
        body = json_body()
        try:
            role = Role(body.get("role"))
        except ValueError:
            raise ValidationError("Unknown role")
        container.profile_service.change_role(
            current_role=current_role(),
            current_profile_id=current_profile_id(),
            profile_id=profile_id,
            role=role,
        )
        return ok(message="Role updated")

    @app.route("/api/admin/profiles/<int:profile_id>", methods=["DELETE"], endpoint="admin_profile_delete")
    @roles_required(Role.SUPER_ADMIN)
    def admin_profile_delete(profile_id: int):
        container.profile_service.delete_profile(
            current_role=current_role(),
            current_profile_id=current_profile_id(),
            profile_id=profile_id,
        )
        return ok(message="Profile deleted")

    @app.route("/api/admin/students/<int:student_id>/assignment", methods=["PUT"], endpoint="admin_student_assign")
    @roles_required(Role.SUPER_ADMIN)
    def admin_student_assign(student_id: int):
        body = json_body()
        container.entity_service.assign_student(
            student_id,
            class_id=_optional_id(body.get("class_id")),
            dormitory_id=_optional_id(body.get("dormitory_id")),
        )
        return ok(message="Student updated")

    @app.route("/api/admin/<kind>", methods=["GET"], endpoint="admin_entities")
    @roles_required(Role.SUPER_ADMIN)
    def admin_entities(kind: str):
        rows = container.entity_service.list(
            _kind(kind),
            class_id=_optional_id(request.args.get("class_id")),
            dormitory_id=_optional_id(request.args.get("dormitory_id")),
        )
        return ok([asdict(r) for r in rows])

    @app.route("/api/admin/<kind>", methods=["POST"], endpoint="admin_entities_add")
    @roles_required(Role.SUPER_ADMIN)
    def admin_entities_add(kind: str):
        body = json_body()
        if _kind(kind) == "students":
            count = container.entity_service.add_students_from_text(
                body.get("text", ""),
                class_id=_optional_id(body.get("class_id")),
                dormitory_id=_optional_id(body.get("dormitory_id")),
            )
        else:
            count = container.entity_service.add_from_text(kind, body.get("text", ""))
        return ok({"inserted": count}, status=201)

    @app.route("/api/admin/<kind>/<int:entity_id>", methods=["PUT"], endpoint="admin_entity_rename")
    @roles_required(Role.SUPER_ADMIN)
    def admin_entity_rename(kind: str, entity_id: int):
        body = json_body()
        container.entity_service.rename(_kind(kind), entity_id, body.get("name"))
        return ok(message="Saved")

    @app.route("/api/admin/<kind>/<int:entity_id>", methods=["DELETE"], endpoint="admin_entity_delete")
    @roles_required(Role.SUPER_ADMIN)
    def admin_entity_delete(kind: str, entity_id: int):
        container.entity_service.delete(_kind(kind), entity_id)
        return ok(message="Deleted")

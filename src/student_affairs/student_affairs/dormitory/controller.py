from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import today_local
from ..common.http import arg_date, arg_int, json_body, ok, roles_required, session_period
from ..core.enums import LeaveType, Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..dashboard.service import month_summary, weekly_chart
from ..recap.export import chart_dataset, group_recap_table
from ..recap.service import ABSENCE_KINDS, LEAVE_TYPES

DORMITORY_ROLES = (Role.DORMITORY_ADMIN, Role.SUPER_ADMIN)


def register(app: Flask, container: Container) -> None:
    def _period():
        return session_period(container.default_period)

    def _leave_type_arg():
        value = request.args.get("type")
        if not value:
            return None
        try:
            return LeaveType(value)
        except ValueError:
            raise ValidationError(f"Unknown leave type: {value}")

    @app.route("/api/dormitory/leaves", methods=["GET"], endpoint="dormitory_leaves")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_leaves():
        records = container.recap_service.leave_recap(
            _period(),
            _leave_type_arg(),
            dormitory_id=arg_int("dormitory_id"),
            student_query=request.args.get("q", ""),
            start=arg_date("start"),
            end=arg_date("end"),
        )
        return ok([r.to_dict() for r in records], count=len(records))

    @app.route("/api/dormitory/absences/<kind>", methods=["GET"], endpoint="dormitory_absences")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_absences(kind: str):
        records = container.recap_service.absence_recap(
            _period(),
            kind,
            dormitory_id=arg_int("dormitory_id"),
            student_query=request.args.get("q", ""),
            start=arg_date("start"),
            end=arg_date("end"),
        )
        return ok([r.to_dict() for r in records], count=len(records))

    @app.route(
        "/api/dormitory/dormitories/<int:dormitory_id>/recap", methods=["GET"], endpoint="dormitory_group_recap"
    )
    @roles_required(*DORMITORY_ROLES)
    def dormitory_group_recap(dormitory_id: int):
        aggregates = container.recap_service.dormitory_recap(dormitory_id, _period())
        return ok(group_recap_table(aggregates, LEAVE_TYPES))

    @app.route("/api/dormitory/students/<int:student_id>/recap", methods=["GET"], endpoint="dormitory_student_recap")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_student_recap(student_id: int):
        recap = container.recap_service.dormitory_student_recap(student_id, _period())
        return ok(
            {
                "student": {"id": recap["student"].id, "name": recap["student"].name},
                "leaves": recap["leaves"].to_dict(),
                "absences": recap["absences"],
                "leave_records": [r.to_dict() for r in recap["leave_records"]],
                "absence_records": [r.to_dict() for r in recap["absence_records"]],
            }
        )

    @app.route("/api/dormitory/dashboard", methods=["GET"], endpoint="dormitory_dashboard")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_dashboard():
        today = arg_date("today") or today_local()
        dataset = container.recap_service.load_dormitory(_period())
        return ok(
            {
                "weekly": chart_dataset(weekly_chart(dataset.leave_records, today, LEAVE_TYPES)),
                "month": month_summary(dataset.leave_records, today, LEAVE_TYPES),
            }
        )

    @app.route("/api/dormitory/leaves", methods=["POST"], endpoint="dormitory_leave_create")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_leave_create():
        body = json_body()
        count = container.dormitory_service.record_leave(
            student_id=body.get("student_id"),
            day=body.get("date"),
            leave_type=body.get("type"),
            number_of_days=body.get("number_of_days", 1),
            reason=body.get("reason"),
            period=_period(),
        )
        return ok({"inserted": count}, status=201)

    @app.route("/api/dormitory/leaves/group", methods=["POST"], endpoint="dormitory_group_leave_create")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_group_leave_create():
        body = json_body()
        count = container.dormitory_service.record_group_leave(
            student_ids=body.get("student_ids") or [],
            day=body.get("date"),
            number_of_days=body.get("number_of_days", 1),
            reason=body.get("reason"),
            period=_period(),
        )
        return ok({"inserted": count}, status=201)

    @app.route("/api/dormitory/leaves/overnight", methods=["POST"], endpoint="dormitory_overnight_leave_create")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_overnight_leave_create():
        body = json_body()
        count = container.dormitory_service.record_overnight_leave(
            student_id=body.get("student_id"),
            day=body.get("date"),
            number_of_days=body.get("number_of_days", 1),
            reason=body.get("reason"),
            period=_period(),
        )
        return ok({"inserted": count}, status=201)

    @app.route("/api/dormitory/absences/prayer", methods=["POST"], endpoint="dormitory_prayer_absence_create")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_prayer_absence_create():
        body = json_body()
        count = container.dormitory_service.record_prayer_absences(
            student_ids=body.get("student_ids") or [],
            day=body.get("date"),
            prayer=body.get("prayer"),
            status=body.get("status") or "unexcused",
            period=_period(),
        )
        return ok({"inserted": count}, status=201)

    @app.route("/api/dormitory/absences/ceremony", methods=["POST"], endpoint="dormitory_ceremony_absence_create")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_ceremony_absence_create():
        body = json_body()
        count = container.dormitory_service.record_ceremony_absences(
            student_ids=body.get("student_ids") or [],
            day=body.get("date"),
            status=body.get("status") or "unexcused",
            period=_period(),
        )
        return ok({"inserted": count}, status=201)

    @app.route("/api/dormitory/leaves/<int:permission_id>", methods=["DELETE"], endpoint="dormitory_leave_delete")
    @roles_required(*DORMITORY_ROLES)
    def dormitory_leave_delete(permission_id: int):
        container.dormitory_service.delete_permission(permission_id)
        return ok(message="Leave deleted")

    @app.route(
        "/api/dormitory/absences/<kind>/<int:absence_id>", methods=["DELETE"], endpoint="dormitory_absence_delete"
    )
    @roles_required(*DORMITORY_ROLES)
    def dormitory_absence_delete(kind: str, absence_id: int):
        event_kind = ABSENCE_KINDS.get(kind)
        if event_kind is None:
            raise ValidationError("Absence type must be 'prayer' or 'ceremony'")
        container.dormitory_service.delete_absence(event_kind, absence_id)
        return ok(message="Absence deleted")

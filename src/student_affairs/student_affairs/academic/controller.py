from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import today_local
from ..common.http import arg_date, arg_int, json_body, ok, roles_required, session_period
from ..core.enums import AcademicStatus, EventKind, Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..dashboard.service import month_summary, weekly_chart
from ..recap.export import RECORD_COLUMNS, chart_dataset, group_recap_table, records_table, write_csv, write_xlsx
from ..recap.service import ACADEMIC_STATUSES

ACADEMIC_ROLES = (Role.ACADEMIC_ADMIN, Role.SUPER_ADMIN)


def _statuses_arg():
    try:
        return [AcademicStatus(s) for s in request.args.getlist("status") if s] or None
    except ValueError:
        raise ValidationError("status must be one of: absent, permission, sick")


def register(app: Flask, container: Container) -> None:
    def _filtered_records():
        return container.recap_service.academic_records(
            class_id=arg_int("class_id"),
            student_query=request.args.get("q", ""),
            start=arg_date("start"),
            end=arg_date("end"),
            statuses=_statuses_arg(),
        )

    def _download(body: bytes, filename: str, mimetype: str):
        return app.response_class(
            body,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/academic/records", methods=["GET"], endpoint="academic_records")
    @roles_required(*ACADEMIC_ROLES)
    def academic_records():
        records = _filtered_records()
        return ok([r.to_dict() for r in records], count=len(records))

    @app.route("/api/academic/records.csv", methods=["GET"], endpoint="academic_records_csv")
    @roles_required(*ACADEMIC_ROLES)
    def academic_records_csv():
        body = write_csv(records_table(_filtered_records()), RECORD_COLUMNS)
        return _download(body, f"academic_recap_{date.today():%Y%m%d}.csv", "text/csv")

    @app.route("/api/academic/records.xlsx", methods=["GET"], endpoint="academic_records_xlsx")
    @roles_required(*ACADEMIC_ROLES)
    def academic_records_xlsx():
        body = write_xlsx(records_table(_filtered_records()), RECORD_COLUMNS, sheet_name="Academic recap")
        return _download(
            body,
            f"academic_recap_{date.today():%Y%m%d}.xlsx",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    @app.route("/api/academic/classes/<int:class_id>/recap", methods=["GET"], endpoint="academic_class_recap")
    @roles_required(*ACADEMIC_ROLES)
    def academic_class_recap(class_id: int):
        aggregates = container.recap_service.class_recap(class_id)
        return ok(group_recap_table(aggregates, ACADEMIC_STATUSES))

    @app.route("/api/academic/students/<int:student_id>/recap", methods=["GET"], endpoint="academic_student_recap")
    @roles_required(*ACADEMIC_ROLES)
    def academic_student_recap(student_id: int):
        recap = container.recap_service.academic_student_recap(student_id)
        return ok(
            {
                "student": {"id": recap["student"].id, "name": recap["student"].name},
                "summary": recap["aggregate"].to_dict(),
                "details": {k: [r.to_dict() for r in rows] for k, rows in recap["details"].items()},
                "first_absences": {
                    course: [d.isoformat() for d in dates] for course, dates in recap["first_absences"].items()
                },
            }
        )

    @app.route("/api/academic/dashboard", methods=["GET"], endpoint="academic_dashboard")
    @roles_required(*ACADEMIC_ROLES)
    def academic_dashboard():
        today = arg_date("today") or today_local()
        records = container.recap_service.load_academic().records
        return ok(
            {
                "today": container.academic_service.count_between(today, today),
                "weekly": chart_dataset(weekly_chart(records, today, ACADEMIC_STATUSES)),
                "month": month_summary(records, today, ACADEMIC_STATUSES),
            }
        )

    @app.route("/api/academic/follow-up", methods=["GET"], endpoint="academic_follow_up")
    @roles_required(*ACADEMIC_ROLES)
    def academic_follow_up():
        records = container.recap_service.load_academic().records
        pending = container.follow_up_service.pending(records)
        return ok([r.to_dict() for r in pending], count=len(pending))

    @app.route(
        "/api/academic/follow-up/<int:absence_id>/confirm", methods=["POST"], endpoint="academic_follow_up_confirm"
    )
    @roles_required(*ACADEMIC_ROLES)
    def academic_follow_up_confirm(absence_id: int):
        container.follow_up_service.confirm(absence_id)
        return ok(message="Follow-up confirmed")

    @app.route("/api/academic/follow-up/<int:absence_id>", methods=["DELETE"], endpoint="academic_follow_up_delete")
    @roles_required(*ACADEMIC_ROLES)
    def academic_follow_up_delete(absence_id: int):
        container.follow_up_service.delete_absence(absence_id)
        return ok(message="Absence deleted")

    @app.route("/api/academic/permissions", methods=["POST"], endpoint="academic_permission_create")
    @roles_required(*ACADEMIC_ROLES)
    def academic_permission_create():
        body = json_body()
        new_id = container.academic_service.record_permission(
            student_id=body.get("student_id"),
            day=body.get("date"),
            permission_type=body.get("type"),
            reason=body.get("reason"),
            period=session_period(container.default_period),
        )
        return ok({"id": new_id}, status=201)

    @app.route("/api/academic/absences", methods=["POST"], endpoint="academic_absence_create")
    @roles_required(*ACADEMIC_ROLES)
    def academic_absence_create():
        body = json_body()
        course_ids = body.get("course_ids")
        if course_ids is None and body.get("course_id") is not None:
            course_ids = [body["course_id"]]
        count = container.academic_service.record_absences(
            student_id=body.get("student_id"),
            day=body.get("date"),
            course_ids=course_ids or [],
            period=session_period(container.default_period),
        )
        return ok({"inserted": count}, status=201)

    @app.route(
        "/api/academic/permissions/<int:permission_id>", methods=["DELETE"], endpoint="academic_permission_delete"
    )
    @roles_required(*ACADEMIC_ROLES)
    def academic_permission_delete(permission_id: int):
        container.academic_service.delete_event(EventKind.ACADEMIC_PERMISSION, permission_id)
        return ok(message="Permission deleted")

    @app.route("/api/academic/absences/<int:absence_id>", methods=["DELETE"], endpoint="academic_absence_delete")
    @roles_required(*ACADEMIC_ROLES)
    def academic_absence_delete(absence_id: int):
        container.academic_service.delete_event(EventKind.ACADEMIC_ABSENCE, absence_id)
        container.follow_up_store.discard(absence_id)
        return ok(message="Absence deleted")

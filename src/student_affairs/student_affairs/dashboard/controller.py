from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, today_local
from ..common.http import arg_date, ok, roles_required, session_period
from ..common.validators import require_positive_int
from ..core.constants import ACTIVITY_WINDOW_DAYS, MAX_WINDOW_DAYS, RECENT_ACTIVITY_HOURS
from ..core.enums import Role
from ..container import Container
from ..recap.export import chart_dataset


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/dashboard/counters", methods=["GET"], endpoint="admin_dashboard_counters")
    @roles_required(Role.SUPER_ADMIN)
    def admin_dashboard_counters():
        today = arg_date("today") or today_local()
        return ok(container.dashboard_service.today_counters(today), date=today.isoformat())

    @app.route("/api/admin/dashboard/activity", methods=["GET"], endpoint="admin_dashboard_activity")
    @roles_required(Role.SUPER_ADMIN)
    def admin_dashboard_activity():
        hours = require_positive_int(
            request.args.get("hours", RECENT_ACTIVITY_HOURS), "hours", maximum=MAX_WINDOW_DAYS * 24
        )
        items = container.dashboard_service.recent_activity(now_local(), hours=hours)
        return ok([i.to_dict() for i in items], count=len(items))

    @app.route("/api/admin/dashboard/chart", methods=["GET"], endpoint="admin_dashboard_chart")
    @roles_required(Role.SUPER_ADMIN)
    def admin_dashboard_chart():
        today = arg_date("today") or today_local()
        days = require_positive_int(
            request.args.get("days", ACTIVITY_WINDOW_DAYS), "days", maximum=MAX_WINDOW_DAYS
        )
        buckets = container.dashboard_service.activity_chart(
            today, session_period(container.default_period), window_days=days
        )
        return ok(chart_dataset(buckets, {"academic": "Academic", "dormitory": "Dormitory"}))

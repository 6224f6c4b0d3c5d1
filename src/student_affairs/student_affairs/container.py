from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .academic.follow_up import FollowUpAcknowledgmentStore, FollowUpService, JsonFileAcknowledgmentStore
from .academic.mysql_academic_repository import MySQLAcademicRepository
from .academic.service import AcademicService
from .core.constants import DEFAULT_ACADEMIC_YEAR, DEFAULT_FETCH_WORKERS, DEFAULT_SEMESTER
from .core.period import PeriodScope
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .database.query import MySQLTableGateway
from .dormitory.mysql_dormitory_repository import MySQLDormitoryRepository
from .dormitory.service import DormitoryService
from .entities.mysql_entity_repository import (
    MySQLProfileRepository,
    MySQLStudentRepository,
    class_repository,
    course_repository,
    dormitory_repository,
)
from .entities.service import EntityAdminService, ProfileService
from .recap.loader import DatasetLoader
from .recap.service import RecapService


@dataclass(frozen=True)
class Container:
    default_period: PeriodScope
    follow_up_store: FollowUpAcknowledgmentStore

    entity_service: EntityAdminService
    profile_service: ProfileService
    academic_service: AcademicService
    follow_up_service: FollowUpService
    dormitory_service: DormitoryService
    recap_service: RecapService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    students,
    classes,
    dormitories,
    courses,
    profiles,
    academic,
    dormitory,
    follow_up_store: FollowUpAcknowledgmentStore,
    default_period: PeriodScope,
    fetch_workers: int = DEFAULT_FETCH_WORKERS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory)."""
    loader = DatasetLoader(max_workers=fetch_workers)
    recap_service = RecapService(
        loader=loader,
        students=students,
        classes=classes,
        dormitories=dormitories,
        courses=courses,
        academic=academic,
        dormitory=dormitory,
    )
    return Container(
        default_period=default_period,
        follow_up_store=follow_up_store,
        entity_service=EntityAdminService(
            {"classes": classes, "dormitories": dormitories, "courses": courses}, students
        ),
        profile_service=ProfileService(profiles),
        academic_service=AcademicService(academic, students, courses),
        follow_up_service=FollowUpService(academic, follow_up_store),
        dormitory_service=DormitoryService(dormitory, students),
        recap_service=recap_service,
        dashboard_service=DashboardService(
            loader=loader,
            students=students,
            courses=courses,
            profiles=profiles,
            academic=academic,
            dormitory=dormitory,
            recap=recap_service,
        ),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    follow_up_store_path: str | Path,
    default_period: Optional[PeriodScope] = None,
    fetch_workers: int = DEFAULT_FETCH_WORKERS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    gateway = MySQLTableGateway(conn)

    return build_services(
        students=MySQLStudentRepository(gateway),
        classes=class_repository(gateway),
        dormitories=dormitory_repository(gateway),
        courses=course_repository(gateway),
        profiles=MySQLProfileRepository(gateway),
        academic=MySQLAcademicRepository(gateway),
        dormitory=MySQLDormitoryRepository(gateway),
        follow_up_store=JsonFileAcknowledgmentStore(follow_up_store_path),
        default_period=default_period or PeriodScope(DEFAULT_ACADEMIC_YEAR, DEFAULT_SEMESTER),
        fetch_workers=fetch_workers,
        conn=conn,
    )

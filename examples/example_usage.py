"""Example: use the service layer directly (no Flask).

Prints the class recap and the pending follow-up list for the default period.
"""

import importlib

from config import get_settings_module

from src.student_affairs.student_affairs.container import build_container
from src.student_affairs.student_affairs.recap.export import group_recap_table
from src.student_affairs.student_affairs.recap.service import ACADEMIC_STATUSES


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        follow_up_store_path=settings.FOLLOW_UP_STORE_PATH,
    )

    dataset = container.recap_service.load_academic()
    for klass in dataset.classes:
        print(f"== {klass.name}")
        for row in group_recap_table(container.recap_service.class_recap(klass.id), ACADEMIC_STATUSES):
            print(row)

    for record in container.follow_up_service.pending(dataset.records)[:5]:
        print(record.date, record.student_name, record.extra.get("course_name"))


if __name__ == "__main__":
    main()

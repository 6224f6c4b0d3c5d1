import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "student_affairs"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_ACADEMIC_YEAR = os.getenv("DEFAULT_ACADEMIC_YEAR", "2025-2026")
DEFAULT_SEMESTER = int(os.getenv("DEFAULT_SEMESTER", "1"))

FOLLOW_UP_STORE_PATH = os.getenv("FOLLOW_UP_STORE_PATH", "/var/lib/student-affairs/academic_absence_confirmed_ids.json")

FETCH_WORKERS = int(os.getenv("FETCH_WORKERS", "6"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

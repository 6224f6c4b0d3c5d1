import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "student_affairs_test"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DEFAULT_ACADEMIC_YEAR = "2025-2026"
DEFAULT_SEMESTER = 1

FOLLOW_UP_STORE_PATH = os.getenv("FOLLOW_UP_STORE_PATH", "instance/test_confirmed_ids.json")

FETCH_WORKERS = 2

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

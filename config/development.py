import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "student_affairs"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Academic period offered before the user picks one
DEFAULT_ACADEMIC_YEAR = os.getenv("DEFAULT_ACADEMIC_YEAR", "2025-2026")
DEFAULT_SEMESTER = int(os.getenv("DEFAULT_SEMESTER", "1"))

# Local JSON file holding acknowledged follow-up absence ids
FOLLOW_UP_STORE_PATH = os.getenv("FOLLOW_UP_STORE_PATH", "instance/academic_absence_confirmed_ids.json")

# Threads used to fan out the fetches feeding one recap
FETCH_WORKERS = int(os.getenv("FETCH_WORKERS", "6"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

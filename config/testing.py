import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TOKEN_TTL_MINUTES = 5

RECONCILE_HOUR = 23
RECONCILE_MINUTE = 5
TOKEN_PURGE_HOURS = 6
ENABLE_SCHEDULER = False

AUTO_INIT_DB = False

import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Minutes an issued attendance token stays redeemable.
TOKEN_TTL_MINUTES = int(os.getenv("TOKEN_TTL_MINUTES", "5"))

# Daily absence sweep (server local time).
RECONCILE_HOUR = int(os.getenv("RECONCILE_HOUR", "23"))
RECONCILE_MINUTE = int(os.getenv("RECONCILE_MINUTE", "5"))
TOKEN_PURGE_HOURS = int(os.getenv("TOKEN_PURGE_HOURS", "6"))
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

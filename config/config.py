import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "attendance-engine-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "attendance_engine")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))

    STAGING_CACHE_DIR = os.environ.get("STAGING_CACHE_DIR", "instance/staging")
    AUTO_MARK_SCAN_INTERVAL_SECONDS = int(os.environ.get("AUTO_MARK_SCAN_INTERVAL_SECONDS", "3600"))
    AUTO_MARK_CUTOFF = os.environ.get("AUTO_MARK_CUTOFF", "23:59")
    DEFAULT_TARGET_PERCENTAGE = float(os.environ.get("DEFAULT_TARGET_PERCENTAGE", "75"))
    FETCH_WORKERS = int(os.environ.get("FETCH_WORKERS", "4"))


# Module-level names, read by create_app() via getattr(settings, ...)
SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

DEBUG = bool(int(os.environ.get("DEBUG", "0")))

LOG_LEVEL = Config.LOG_LEVEL
AUTO_INIT_DB = Config.AUTO_INIT_DB
STAGING_CACHE_DIR = Config.STAGING_CACHE_DIR
AUTO_MARK_SCAN_INTERVAL_SECONDS = Config.AUTO_MARK_SCAN_INTERVAL_SECONDS
AUTO_MARK_CUTOFF = Config.AUTO_MARK_CUTOFF
DEFAULT_TARGET_PERCENTAGE = Config.DEFAULT_TARGET_PERCENTAGE
FETCH_WORKERS = Config.FETCH_WORKERS

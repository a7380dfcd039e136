import os

from config.config import *  # noqa: F401,F403

DEBUG = False
TESTING = True
AUTO_INIT_DB = False

DB_CONFIG = {
    "host": os.getenv("TEST_DB_HOST", "localhost"),
    "port": int(os.getenv("TEST_DB_PORT", "3306")),
    "user": os.getenv("TEST_DB_USER", "root"),
    "password": os.getenv("TEST_DB_PASSWORD", ""),
    "database": os.getenv("TEST_DB_NAME", "attendance_engine_test"),
}

STAGING_CACHE_DIR = os.getenv("STAGING_CACHE_DIR", "instance/staging-test")

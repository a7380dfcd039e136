import os

from config.config import *  # noqa: F401,F403

DEBUG = True
LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")

# Apply schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "1")))

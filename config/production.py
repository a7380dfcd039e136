import os

from config.config import *  # noqa: F401,F403

DEBUG = False
AUTO_INIT_DB = False
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")

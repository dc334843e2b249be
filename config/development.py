import os

from config.config import Config, db_config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = db_config()

STORAGE_BACKEND = Config.STORAGE_BACKEND
LOCAL_STORE_PATH = Config.LOCAL_STORE_PATH
SCAN_COOLDOWN_MS = Config.SCAN_COOLDOWN_MS
SESSION_IDLE_TTL_S = Config.SESSION_IDLE_TTL_S

DEBUG = True
LOG_LEVEL = "DEBUG"

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

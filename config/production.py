import os

from config.config import Config, db_config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = db_config()

STORAGE_BACKEND = Config.STORAGE_BACKEND
LOCAL_STORE_PATH = Config.LOCAL_STORE_PATH
SCAN_COOLDOWN_MS = Config.SCAN_COOLDOWN_MS
SESSION_IDLE_TTL_S = Config.SESSION_IDLE_TTL_S

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

AUTO_INIT_DB = Config.AUTO_INIT_DB

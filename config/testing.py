import os

SECRET_KEY = "test-secret"

DB_CONFIG = None

# Tests never reach MySQL; point LOCAL_STORE_PATH at a tmp dir.
STORAGE_BACKEND = "local"
LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", "data/test_qr_attendance_records.json")
SCAN_COOLDOWN_MS = 2000

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

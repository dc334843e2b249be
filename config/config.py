import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "qr-attendance-dev-secret"

    # Remote store (MySQL)
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "qr_attendance")
    DB_CONNECT_TIMEOUT = int(os.environ.get("DB_CONNECT_TIMEOUT", "5"))

    # auto = remote with local fallback, remote = MySQL only, local = JSON file only
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "auto").lower()
    LOCAL_STORE_PATH = os.environ.get("LOCAL_STORE_PATH", "data/qr_attendance_records.json")

    # Same-code cooldown; also the page's pause after an accepted scan.
    SCAN_COOLDOWN_MS = int(os.environ.get("SCAN_COOLDOWN_MS", "2000"))

    # Scanner tabs idle this long lose their session.
    SESSION_IDLE_TTL_S = int(os.environ.get("SESSION_IDLE_TTL_S", str(4 * 60 * 60)))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Dev helpers
    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))


def db_config() -> dict:
    return {
        "host": Config.DB_HOST,
        "port": Config.DB_PORT,
        "user": Config.DB_USER,
        "password": Config.DB_PASSWORD,
        "database": Config.DB_NAME,
        "connect_timeout": Config.DB_CONNECT_TIMEOUT,
    }

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SCAN_COOLDOWN_MS = 2000
DEFAULT_LOCAL_STORE_PATH = "data/qr_attendance_records.json"

CSV_HEADERS = ["No.", "Name", "Country", "Scan Date", "Scan Time", "Full Timestamp"]

TEST_RECORD_PAYLOAD = "TESTLAST, TestFirst, Test Country"

# Scan sessions untouched this long are dropped from the registry.
DEFAULT_SESSION_IDLE_TTL_S = 4 * 60 * 60

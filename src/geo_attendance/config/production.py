import os

API_BASE_URL = os.getenv("ATTENDANCE_API_BASE_URL", "https://attendance-backend-8755.onrender.com")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

DEVICE_TIMEZONE = os.getenv("DEVICE_TIMEZONE", "")
PLATFORM = os.getenv("DEVICE_PLATFORM", "android")

STORAGE_PATH = os.getenv("STORAGE_PATH", os.path.expanduser("~/.geo_attendance/session.json"))

CACHE_DELAY_MS = int(os.getenv("CACHE_DELAY_MS", "300"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

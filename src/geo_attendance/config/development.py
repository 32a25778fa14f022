import os

API_BASE_URL = os.getenv("ATTENDANCE_API_BASE_URL", "http://localhost:5000")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

# IANA zone used to render times; empty means the system local zone
DEVICE_TIMEZONE = os.getenv("DEVICE_TIMEZONE", "")
PLATFORM = os.getenv("DEVICE_PLATFORM", "android")

# JSON file backing the session store; empty keeps the session in memory
STORAGE_PATH = os.getenv("STORAGE_PATH", ".session.json")

CACHE_DELAY_MS = int(os.getenv("CACHE_DELAY_MS", "300"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

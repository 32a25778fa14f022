import os

API_BASE_URL = "http://attendance.test"
REQUEST_TIMEOUT_SECONDS = 5.0

DEVICE_TIMEZONE = "UTC"
PLATFORM = os.getenv("DEVICE_PLATFORM", "android")

STORAGE_PATH = ""

CACHE_DELAY_MS = 0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

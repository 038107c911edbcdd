import os

from config import env_flag, env_timeout

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Local snapshot lives in DATA_DIR/absensi_app_data.json
DATA_DIR = os.getenv("DATA_DIR", "data")

# Spreadsheet web-app URL used for backup/restore; empty disables sync.
REMOTE_ENDPOINT = os.getenv("REMOTE_ENDPOINT", "")
AUTO_PULL_ON_START = env_flag("AUTO_PULL_ON_START", "0")
AUTO_PUSH = env_flag("AUTO_PUSH", "1")
SYNC_TIMEOUT = env_timeout("SYNC_TIMEOUT")

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

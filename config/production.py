import os

from config import env_flag, env_timeout

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATA_DIR = os.getenv("DATA_DIR", "data")

REMOTE_ENDPOINT = os.getenv("REMOTE_ENDPOINT", "")
AUTO_PULL_ON_START = env_flag("AUTO_PULL_ON_START", "1")
AUTO_PUSH = env_flag("AUTO_PUSH", "1")
SYNC_TIMEOUT = env_timeout("SYNC_TIMEOUT")

# Set both in the environment; the defaults are only for a first start.
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

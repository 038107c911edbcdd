import os

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DATA_DIR = os.getenv("DATA_DIR", "data-test")

# Never talk to a real spreadsheet from tests.
REMOTE_ENDPOINT = ""
AUTO_PULL_ON_START = False
AUTO_PUSH = False
SYNC_TIMEOUT = None

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin"

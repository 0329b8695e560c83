import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "uri": os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGODB_DB", "hostel_db_test"),
    "server_selection_timeout_ms": 1000,
}

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_JSON = False

AUTO_INIT_DB = False
AUTO_SEED_DB = False

import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "uri": os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGODB_DB", "hostel_db"),
    "server_selection_timeout_ms": int(os.getenv("MONGODB_TIMEOUT_MS", "5000")),
}

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))

# If enabled, indexes are created on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed a demo admin and rooms on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

USERS_FILE = os.getenv("USERS_FILE", "data/users.json")

# werkzeug method string; the cost factor lives here
PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")
MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "8"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Optional: create an admin account on startup
AUTO_SEED_ADMIN = bool(int(os.getenv("AUTO_SEED_ADMIN", "0")))
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
# no default: seeding is skipped until one is set
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

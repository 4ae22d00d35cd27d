import os

SECRET_KEY = "test-secret"

USERS_FILE = os.getenv("USERS_FILE", "data/test-users.json")

# cheap hash so the suite stays fast
PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
MIN_PASSWORD_LENGTH = 8

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_SEED_ADMIN = False
ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"

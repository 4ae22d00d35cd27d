"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

DEFAULT_USERS_FILE = "data/users.json"
DEFAULT_PASSWORD_HASH_METHOD = "scrypt"
DEFAULT_MIN_PASSWORD_LENGTH = 8

# One message for every failed login, whatever the cause.
AUTH_FAILED_MESSAGE = "Incorrect username or password"
LOGIN_OK_MESSAGE = "Login successful"
NO_VALID_FIELDS_MESSAGE = "No valid fields provided"

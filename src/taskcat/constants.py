"""Application-level constants for taskcat."""

APP_NAME = "taskcat"

DATA_FILE_EXTENSION = ".bin"
LOG_FILE_EXTENSION = ".log"

USER_DATA_DIR = f"~/.{APP_NAME}"
DEFAULT_PROFILE_PATH = f"{USER_DATA_DIR}/profile.json"
REPL_HISTORY_FILE = f"{USER_DATA_DIR}/history"

# Profile template values, relative to the profile's directory
DEFAULT_DATA_PATH = f"./tasks{DATA_FILE_EXTENSION}"
DEFAULT_LOGS_DIR = "./logs"

DATETIME_FORMAT_FILENAME = "%Y-%m-%d_%H-%M-%S"

DEBUG_ENV_VAR = "TASKCAT_DEBUG"

STATE_DIR_NAME = ".kanban_sync"
CONFIG_FILE = "config.yaml"

DEFAULT_PAGE_SIZE = 20
DEFAULT_STALE_AFTER_SECONDS = 120
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

MOVE_FAILED_MESSAGE = "Unable to move task"

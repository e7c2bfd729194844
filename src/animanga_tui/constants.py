"""Constants used throughout the application."""

from enum import Enum


class ListKind(str, Enum):
    """Which watch-list an entry belongs to."""

    ANIME = "anime"
    MANGA = "manga"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def unit_label(self) -> str:
        """Name of the progress unit shown in the table header."""
        return "Episodes" if self is ListKind.ANIME else "Chapters"


class Category(str, Enum):
    """Status filter applied to the active list."""

    ALL = "all"
    WATCHING = "watching"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    DROPPED = "dropped"
    PLAN_TO_WATCH = "plan_to_watch"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


# Cycling order for the category tabs
CATEGORY_ORDER = (
    Category.ALL,
    Category.WATCHING,
    Category.COMPLETED,
    Category.ON_HOLD,
    Category.DROPPED,
    Category.PLAN_TO_WATCH,
)

LIST_ORDER = (ListKind.ANIME, ListKind.MANGA)

# Environment overrides
DB_PATH_ENV_VAR = "ANIMANGA_DB_PATH"
CONFIG_PATH_ENV_VAR = "ANIMANGA_CONFIG"

# Default values
DEFAULT_CONFIG_PATH = "data/config.yaml"
DEFAULT_DB_PATH = "data/db.json"
DEFAULT_LOG_FILE = "data/animanga.log"
DEFAULT_TICK_INTERVAL_MS = 200
DEFAULT_NOTICE_TICKS = 15  # 3 seconds at the default tick rate
MAX_SCORE = 10

"""Enum definitions for application constants."""

from enum import Enum


class Role(str, Enum):
    """
    User roles.

    - USER: manages their own tasks, directory and profile
    - ADMIN: platform admin (users, tool catalog, logs, exports)
    """
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class CalculationMethod(str, Enum):
    """Calendar used for zakat haul calculation."""
    HIJRI = "Hijri"
    MASEHI = "Masehi"


class ResetCycle(str, Enum):
    """
    Recurrence policy of a task.

    ONE_TIME is accepted on input but never reset by the sweep.
    """
    ONE_TIME = "one-time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# Elapsed-day thresholds, not calendar boundaries: a "month" is 30 days.
RESET_CYCLE_DAYS: dict[ResetCycle, int] = {
    ResetCycle.DAILY: 1,
    ResetCycle.WEEKLY: 7,
    ResetCycle.MONTHLY: 30,
    ResetCycle.YEARLY: 365,
}


class DirectoryItemType(str, Enum):
    FOLDER = "folder"
    ITEM = "item"


class SubjectType(str, Enum):
    """Entity kinds an activity log entry can point at."""
    USER = "user"
    TASK = "task"
    TASK_HISTORY = "task_history"
    CATEGORY = "category"
    DIRECTORY_ITEM = "directory_item"
    TOOL = "tool"


class SourceType(str, Enum):
    """Citation kinds attached to a catalog tool."""
    QURAN = "quran"
    HADITH = "hadith"
    WEBSITE = "website"
    NONE = "none"


class ActivityAction(str, Enum):
    """Activity log action names (dotted, grouped by area)."""
    # Auth
    USER_REGISTERED = "user.registered"
    USER_LOGIN = "user.login"
    USER_LOGOUT = "user.logout"
    # Profile
    PROFILE_UPDATED = "user.profile_updated"
    DATA_EXPORTED = "user.data_exported"
    DATA_RESET = "user.data_reset"
    # Tasks
    TASK_CREATED = "task.created"
    TASK_UPDATED = "task.updated"
    TASK_DELETED = "task.deleted"
    TASK_COMPLETED = "task.completed"
    TASK_UNCOMPLETED = "task.uncompleted"
    TASK_PROGRESSED = "task.progressed"
    TASK_RESET = "task.reset"
    HISTORY_UPDATED = "history.updated"
    HISTORY_DELETED = "history.deleted"
    # Directory
    DIRECTORY_ITEM_CREATED = "directory.item_created"
    DIRECTORY_ITEM_UPDATED = "directory.item_updated"
    DIRECTORY_ITEM_DELETED = "directory.item_deleted"
    # Admin
    ADMIN_USER_CREATED = "admin.user_created"
    ADMIN_USER_UPDATED = "admin.user_updated"
    ADMIN_USER_DELETED = "admin.user_deleted"
    ADMIN_TOOL_CREATED = "admin.tool_created"
    ADMIN_TOOL_UPDATED = "admin.tool_updated"
    ADMIN_TOOL_DELETED = "admin.tool_deleted"
    ADMIN_USERS_EXPORTED = "admin.users_exported"
    ADMIN_TOOLS_EXPORTED = "admin.tools_exported"
    ADMIN_STATS_EXPORTED = "admin.stats_exported"


DEFAULT_CATEGORIES = (
    "SDM",
    "Keuangan",
    "Kepatuhan",
    "Pemasaran",
    "Operasional",
    "Teknologi",
)

# Category whose completion rate feeds the sharia-compliance KPI
COMPLIANCE_CATEGORY = "Kepatuhan"

HADITH_BOOKS = frozenset({
    "abu-daud",
    "ahmad",
    "bukhari",
    "darimi",
    "ibnu-majah",
    "malik",
    "muslim",
    "nasai",
    "tirmidzi",
})

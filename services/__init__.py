"""Business logic service layer.

This package groups higher-level operations that coordinate multiple models or
perform complex queries. Keeping business logic out of route handlers makes
your codebase easier to test and maintain.
"""

from services.user_service import create_user, authenticate_user  # noqa: F401
from services.goal_service import (
    calculate_daily_progress,
    check_goal_completion,
    get_daily_goals_for_user,
    update_user_timezone,
    update_goal_definition,
)  # noqa: F401
from services.goal_archive_service import archive_goals_for_date, archive_pending_goals  # noqa: F401
from services.goal_history_service import get_goal_history  # noqa: F401
from services.progress_service import get_progress_for_day, get_user_stats, log_progress  # noqa: F401
from services.leaderboard_service import (
    get_overall_leaderboard,
    get_task_leaderboard,
    invalidate_leaderboard,
)  # noqa: F401


__all__ = [
    "create_user",
    "authenticate_user",
    "calculate_daily_progress",
    "check_goal_completion",
    "get_daily_goals_for_user",
    "update_user_timezone",
    "update_goal_definition",
    "archive_goals_for_date",
    "archive_pending_goals",
    "get_goal_history",
    "log_progress",
    "get_progress_for_day",
    "get_user_stats",
    "get_overall_leaderboard",
    "get_task_leaderboard",
    "invalidate_leaderboard",
]

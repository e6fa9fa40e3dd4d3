"""Goal history service functions.

Reads archived GoalHistory rows for a user, paginates them and summarizes
completion and streaks over the whole filtered set.
"""
from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import asc, desc

from models import GoalHistory, GoalStatus, Task
from services.exceptions import InvalidArgumentError
from services.goal_service import get_user_or_404


def calculate_streaks(statuses: Iterable[GoalStatus]) -> Tuple[int, int]:
    """
    Compute ``(current, longest)`` streaks from statuses in ascending date order.

    Consecutive rows count as consecutive days even when their dates are not
    adjacent, so the streak is relative to the queried window.
    """
    running = 0
    longest = 0
    for status in statuses:
        if GoalStatus(status).is_target_reached:
            running += 1
        else:
            running = 0
        longest = max(longest, running)
    # running is only non-zero here if the last row qualified
    return running, longest


def get_goal_history(user_id: int,
                     start_date: Optional[date] = None,
                     end_date: Optional[date] = None,
                     task_id: Optional[int] = None,
                     limit: int = 30,
                     offset: int = 0) -> Dict:
    """
    Get goal completion history for a user.

    Args:
        user_id: ID of the user
        start_date: Inclusive lower bound on goal_date
        end_date: Inclusive upper bound on goal_date
        task_id: Restrict to a single task
        limit: Page size
        offset: Rows to skip, newest first

    Returns:
        Dict with the history page, pagination info and summary statistics
    """
    if limit < 1:
        raise InvalidArgumentError('Limit must be a positive number.')
    if offset < 0:
        raise InvalidArgumentError('Offset cannot be negative.')
    if start_date and end_date and start_date > end_date:
        raise InvalidArgumentError('Start date must not be after end date.')

    user = get_user_or_404(user_id)

    query = GoalHistory.query.filter(GoalHistory.user_id == user.id)
    if start_date:
        query = query.filter(GoalHistory.goal_date >= start_date)
    if end_date:
        query = query.filter(GoalHistory.goal_date <= end_date)
    if task_id:
        query = query.filter(GoalHistory.task_id == task_id)

    total = query.count()
    page = (query
            .join(Task, GoalHistory.task_id == Task.id)
            .order_by(desc(GoalHistory.goal_date), Task.display_order, Task.id)
            .limit(limit)
            .offset(offset)
            .all())

    # Summary and streaks cover every matching row, not only this page
    rows = (query
            .with_entities(GoalHistory.goal_date, GoalHistory.status, GoalHistory.completion_rate)
            .order_by(asc(GoalHistory.goal_date), GoalHistory.task_id)
            .all())

    completed_days = sum(1 for row in rows if row.status.is_target_reached)
    average_completion_rate = (
        sum(float(row.completion_rate) for row in rows) / len(rows) if rows else 0
    )
    current_streak, longest_streak = calculate_streaks(row.status for row in rows)

    return {
        'history': [entry.to_dict() for entry in page],
        'pagination': {
            'limit': limit,
            'offset': offset,
            'total': total,
            'has_more': offset + limit < total,
        },
        'summary': {
            'total_days': len(rows),
            'completed_days': completed_days,
            'average_completion_rate': round(average_completion_rate, 2),
            'streak': {
                'current': current_streak,
                'longest': longest_streak,
            },
        },
    }

"""Progress logging service functions.

These helpers record a user's activity for a task on a calendar day and then
re-check that day's goal, so callers learn about fresh completions straight
away. They also total the points a user has earned.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy import func

from extensions import db
from models import ProgressEntry, Task
from services.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from services.goal_service import INVALID_TIMEZONE_MESSAGE, check_goal_completion, get_user_or_404, resolve_goal_date
from services.goal_status import round_half_up
from services.leaderboard_service import invalidate_leaderboard
from services import timezone_service as tz_service


def get_active_task(task_id: int) -> Task:
    task = Task.query.filter_by(id=task_id, is_active=True).first()
    if task is None:
        raise NotFoundError('Task not found or inactive', code='TASK_NOT_FOUND')
    return task


def log_progress(user_id: int,
                 task_id: int,
                 value,
                 logged_date: Optional[date] = None,
                 timezone: Optional[str] = None) -> Dict[str, Any]:
    """
    Create and persist a progress entry, then check the day's goal.

    Args:
        user_id: ID of the user logging progress
        task_id: ID of an active task
        value: Amount done, in the task's unit (> 0)
        logged_date: Calendar day to log against (defaults to the user's local today)
        timezone: Overrides the user's stored timezone for resolving today

    Returns:
        Dict with the created entry and the goal completion result (or None)
    """
    try:
        value = Decimal(str(value))
    except InvalidOperation:
        raise InvalidArgumentError('Value must be a number.')
    if not value.is_finite() or value <= 0:
        raise InvalidArgumentError('Value must be a positive number.')

    user = get_user_or_404(user_id)
    task = get_active_task(task_id)
    user_timezone, logged_date = resolve_goal_date(user, logged_date, timezone)

    existing = ProgressEntry.query.filter_by(
        user_id=user.id,
        task_id=task.id,
        logged_date=logged_date,
    ).first()
    if existing:
        raise ConflictError('Progress already logged for this task today', code='DUPLICATE_ENTRY')

    entry = ProgressEntry(
        user_id=user.id,
        task_id=task.id,
        logged_date=logged_date,
        value=value,
        points_earned=round_half_up(float(value) * task.points_per_unit),
    )
    db.session.add(entry)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(f'User {user.id} logged {value} {task.unit} of {task.name} for {logged_date}')
    invalidate_leaderboard(task.id)
    completion = check_goal_completion(user.id, task.id, logged_date, user_timezone)

    return {
        'entry': entry.to_dict(),
        'goal_completion': completion,
    }


def get_progress_for_day(user_id: int,
                         logged_date: Optional[date] = None,
                         timezone: Optional[str] = None) -> Dict[str, Any]:
    """A user's entries for one day (default: local today), in task display order."""
    if timezone is not None and not tz_service.is_valid_timezone(timezone):
        raise InvalidArgumentError(INVALID_TIMEZONE_MESSAGE, code='INVALID_TIMEZONE')

    user = get_user_or_404(user_id)
    user_timezone, logged_date = resolve_goal_date(user, logged_date, timezone)

    entries = (ProgressEntry.query
               .join(Task, ProgressEntry.task_id == Task.id)
               .filter(ProgressEntry.user_id == user.id, ProgressEntry.logged_date == logged_date)
               .order_by(Task.display_order, Task.id)
               .all())

    logs = []
    for entry in entries:
        log = entry.to_dict()
        log['task'] = entry.task.to_dict()
        logs.append(log)

    return {
        'date': logged_date.isoformat(),
        'timezone': user_timezone,
        'total_points': sum(entry.points_earned for entry in entries),
        'entries': logs,
    }


def get_user_stats(user_id: int) -> Dict[str, Any]:
    """Lifetime point and value totals for a user, overall and per task."""
    user = get_user_or_404(user_id)

    rows = (db.session.query(
                Task.id,
                Task.name,
                Task.unit,
                func.sum(ProgressEntry.value).label('total_value'),
                func.sum(ProgressEntry.points_earned).label('total_points'),
            )
            .join(ProgressEntry, ProgressEntry.task_id == Task.id)
            .filter(ProgressEntry.user_id == user.id)
            .group_by(Task.id, Task.name, Task.unit, Task.display_order)
            .order_by(Task.display_order, Task.id)
            .all())

    task_stats = [{
        'task_id': row.id,
        'task_name': row.name,
        'unit': row.unit,
        'total_value': float(Decimal(str(row.total_value or 0))),
        'total_points': int(row.total_points or 0),
    } for row in rows]

    return {
        'user_id': user.id,
        'username': user.username,
        'total_points': sum(stat['total_points'] for stat in task_stats),
        'task_stats': task_stats,
    }

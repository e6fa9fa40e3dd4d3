"""Goal-related service functions.

These helpers materialize a user's daily goal progress, detect fresh goal
completions and manage the global goal definitions. Every recalculation reads
the day's progress entries from scratch; the GoalProgress row only caches
the latest result.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from flask import current_app
from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite

from extensions import db
from models import GoalDefinition, GoalHistory, GoalProgress, GoalStatus, ProgressEntry, TargetType, Task, User
from services.exceptions import InvalidArgumentError, NotFoundError
from services.goal_status import calculate_goal_status, goal_outcome, percentage, round_half_up
from services import timezone_service as tz_service


INVALID_TIMEZONE_MESSAGE = 'Invalid timezone format. Must be a valid IANA timezone identifier.'


def get_user_or_404(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError('User not found', code='USER_NOT_FOUND')
    return user


def resolve_goal_date(user: User, goal_date: Optional[date] = None, timezone: Optional[str] = None):
    """Return ``(timezone, goal_date)``, defaulting to the user's local today."""
    user_timezone = timezone or user.timezone or tz_service.DEFAULT_TIMEZONE
    if goal_date is None:
        goal_date = tz_service.get_user_local_date(user_timezone)
    return user_timezone, goal_date


def get_active_goal_definitions() -> List[GoalDefinition]:
    """All active goal definitions whose task is active, in display order."""
    return (GoalDefinition.query
            .join(Task, GoalDefinition.task_id == Task.id)
            .filter(GoalDefinition.is_active.is_(True), Task.is_active.is_(True))
            .order_by(Task.display_order, Task.id)
            .all())


def sum_progress_value(user_id: int, task_id: int, goal_date: date) -> Decimal:
    """Total logged value for one user, task and day."""
    total = db.session.query(func.sum(ProgressEntry.value)).filter(
        ProgressEntry.user_id == user_id,
        ProgressEntry.task_id == task_id,
        ProgressEntry.logged_date == goal_date,
    ).scalar()
    return Decimal(str(total)) if total is not None else Decimal('0')


def _find_goal_progress(user_id: int, task_id: int, goal_date: date) -> Optional[GoalProgress]:
    return GoalProgress.query.filter_by(user_id=user_id, task_id=task_id, goal_date=goal_date).first()


def get_archived_goals(user_id: int, goal_date: date) -> Dict[int, GoalHistory]:
    """History rows for one user and day, keyed by task id."""
    rows = GoalHistory.query.filter_by(user_id=user_id, goal_date=goal_date).all()
    return {row.task_id: row for row in rows}


def get_or_create_goal_progress(user_id: int, definition: GoalDefinition, goal_date: date) -> GoalProgress:
    """
    Read-or-initialize the live progress row for a user, task and day.

    The target value is snapshotted from the definition only when the row is
    created. On SQLite and PostgreSQL the insert is an upsert on the unique
    key, so two concurrent first reads end up sharing one row. A day that has
    already been archived never gets a live row again.
    """
    progress = _find_goal_progress(user_id, definition.task_id, goal_date)
    if progress is not None:
        return progress

    archived = GoalHistory.query.filter_by(
        user_id=user_id, task_id=definition.task_id, goal_date=goal_date
    ).first()
    if archived is not None:
        raise InvalidArgumentError('Goal day already archived', code='GOAL_DAY_ARCHIVED')

    values = {
        'user_id': user_id,
        'task_id': definition.task_id,
        'goal_date': goal_date,
        'target_value': definition.target_value,
        'current_value': Decimal('0'),
        'status': GoalStatus.NOT_STARTED,
    }
    dialect = db.engine.dialect.name
    if dialect in ('sqlite', 'postgresql'):
        insert = sqlite.insert if dialect == 'sqlite' else postgresql.insert
        stmt = insert(GoalProgress.__table__).values(**values).on_conflict_do_nothing(
            index_elements=['user_id', 'task_id', 'goal_date']
        )
        db.session.execute(stmt)
        return GoalProgress.query.filter_by(
            user_id=user_id, task_id=definition.task_id, goal_date=goal_date
        ).one()

    progress = GoalProgress(**values)
    db.session.add(progress)
    db.session.flush()
    return progress


def _recalculate(progress: GoalProgress, target_type: TargetType) -> Dict:
    """Recompute one progress row in place. Returns the status result and whether it changed."""
    current_value = sum_progress_value(progress.user_id, progress.task_id, progress.goal_date)
    result = calculate_goal_status(
        current_value,
        progress.target_value,
        target_type,
        progress.completed_at,
    )

    changed = progress.current_value != current_value or progress.status != result.status
    if changed:
        progress.current_value = current_value
        progress.status = result.status
        progress.completed_at = result.completed_at

    return {'current_value': current_value, 'result': result, 'changed': changed}


def _progress_view(progress: GoalProgress, definition: GoalDefinition, calculation: Dict) -> Dict:
    result = calculation['result']
    return {
        'id': progress.id,
        'user_id': progress.user_id,
        'task_id': definition.task_id,
        'task_name': definition.task.name,
        'unit': definition.task.unit,
        'goal_date': progress.goal_date.isoformat(),
        'current_value': float(calculation['current_value']),
        'target_value': float(progress.target_value),
        'target_type': definition.target_type.value,
        'status': result.status.value,
        'outcome': goal_outcome(result.status, definition.target_type),
        'completion_rate': result.completion_rate,
        'completed_at': result.completed_at.isoformat() if result.completed_at else None,
        'last_updated': progress.last_updated.isoformat() if progress.last_updated else None,
        'archived': False,
    }


def _archived_view(history: GoalHistory, definition: GoalDefinition) -> Dict:
    """Read-only view of an archived day, shaped like a live progress dict."""
    return {
        'id': None,
        'user_id': history.user_id,
        'task_id': definition.task_id,
        'task_name': definition.task.name,
        'unit': definition.task.unit,
        'goal_date': history.goal_date.isoformat(),
        'current_value': float(history.final_value),
        'target_value': float(history.target_value),
        'target_type': definition.target_type.value,
        'status': history.status.value,
        'outcome': goal_outcome(history.status, definition.target_type),
        'completion_rate': round_half_up(float(history.completion_rate)),
        'completed_at': history.completed_at.isoformat() if history.completed_at else None,
        'last_updated': history.archived_at.isoformat() if history.archived_at else None,
        'archived': True,
    }


def calculate_daily_progress(user_id: int, goal_date: Optional[date] = None,
                             timezone: Optional[str] = None) -> List[Dict]:
    """
    Calculate daily goal progress for a user on a specific date.

    Args:
        user_id: ID of the user
        goal_date: Day to calculate (defaults to today in the user's timezone)
        timezone: Overrides the user's stored timezone for resolving today

    Returns:
        One progress dict per active goal definition, in task display order.
        Goals of an already archived day come from the history table and are
        flagged ``archived``; nothing is written for them.
    """
    user = get_user_or_404(user_id)
    _, goal_date = resolve_goal_date(user, goal_date, timezone)

    definitions = get_active_goal_definitions()
    if not definitions:
        return []

    archived = get_archived_goals(user.id, goal_date)
    views = []
    writes = 0
    try:
        for definition in definitions:
            history = archived.get(definition.task_id)
            if history is not None:
                views.append((None, definition, history))
                continue
            progress = get_or_create_goal_progress(user.id, definition, goal_date)
            calculation = _recalculate(progress, definition.target_type)
            writes += calculation['changed']
            views.append((progress, definition, calculation))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    if writes:
        current_app.logger.debug(f'Updated {writes} goal progress row(s) for user {user.id} on {goal_date}')

    return [_progress_view(progress, definition, source) if progress is not None
            else _archived_view(source, definition)
            for progress, definition, source in views]


def check_goal_completion(user_id: int, task_id: int, goal_date: Optional[date] = None,
                          timezone: Optional[str] = None) -> Optional[Dict]:
    """
    Check whether a goal was just completed (used to trigger celebrations).

    Returns None when there is nothing to check: no live progress row for the
    day, or the task has no active goal definition.
    """
    user = get_user_or_404(user_id)
    _, goal_date = resolve_goal_date(user, goal_date, timezone)

    progress = _find_goal_progress(user.id, task_id, goal_date)
    definition = progress.task.goal_definition if progress is not None else None
    if progress is None or definition is None or not definition.is_active:
        return None

    previous_status = progress.status
    try:
        calculation = _recalculate(progress, definition.target_type)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    new_status = calculation['result'].status
    goal_completed = not previous_status.is_target_reached and new_status.is_target_reached
    if goal_completed:
        current_app.logger.info(f'User {user.id} completed goal for task {task_id} on {goal_date}')

    return {
        'goal_completed': goal_completed,
        'target_reached': new_status.is_target_reached,
        'previous_status': previous_status.value,
        'new_status': new_status.value,
        'completion_rate': calculation['result'].completion_rate,
    }


def get_daily_goals_for_user(user_id: int, goal_date: Optional[date] = None,
                             timezone: Optional[str] = None) -> Dict:
    """Get daily goals with progress and an overall summary for a user."""
    if timezone is not None and not tz_service.is_valid_timezone(timezone):
        raise InvalidArgumentError(INVALID_TIMEZONE_MESSAGE, code='INVALID_TIMEZONE')

    user = get_user_or_404(user_id)
    user_timezone, goal_date = resolve_goal_date(user, goal_date, timezone)

    local_time = tz_service.format_local_time(user_timezone)
    goals = calculate_daily_progress(user.id, goal_date, user_timezone)

    completed = sum(1 for goal in goals if GoalStatus(goal['status']).is_target_reached)
    total = len(goals)
    completion_rate = percentage(completed, total)

    return {
        'goal_date': goal_date.isoformat(),
        'user_timezone': user_timezone,
        'local_time': local_time,
        'overall_progress': {
            'completed': completed,
            'total': total,
            'completion_rate': completion_rate,
        },
        'goals': goals,
    }


def update_user_timezone(user_id: int, timezone: str) -> Dict:
    """Update a user's timezone and report when their goals next reset."""
    if not tz_service.is_valid_timezone(timezone):
        raise InvalidArgumentError(INVALID_TIMEZONE_MESSAGE, code='INVALID_TIMEZONE')

    user = get_user_or_404(user_id)
    user.timezone = timezone
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(f'User {user.id} timezone set to {timezone}')
    next_reset = tz_service.get_next_local_midnight(timezone)
    return {
        'user_id': user.id,
        'timezone': user.timezone,
        'updated_at': user.updated_at.isoformat() if user.updated_at else None,
        'utc_offset': tz_service.get_timezone_offset(timezone),
        'goal_reset_time': '00:00',
        'next_goal_reset': next_reset.isoformat(),
    }


def update_goal_definition(task_id: int, target_value=None, target_type=None,
                           is_active: Optional[bool] = None) -> GoalDefinition:
    """
    Change the global goal for a task.

    Live progress rows keep the target they were created with; the new target
    applies from the next row created for each user.
    """
    definition = GoalDefinition.query.filter_by(task_id=task_id).first()
    if definition is None:
        raise NotFoundError('Goal definition not found')

    if target_value is not None:
        try:
            target_value = Decimal(str(target_value))
        except InvalidOperation:
            raise InvalidArgumentError('Target value must be a number.')
        if not target_value.is_finite() or target_value <= 0:
            raise InvalidArgumentError('Target value must be a positive number.')

    if target_type is not None:
        try:
            target_type = TargetType(target_type)
        except ValueError:
            raise InvalidArgumentError(f'Unknown target type: {target_type}')

    if target_value is not None:
        definition.target_value = target_value
    if target_type is not None:
        definition.target_type = target_type

    if is_active is not None:
        definition.is_active = is_active

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(f'Goal definition for task {task_id} updated: {definition.target_type.value} {definition.target_value}')
    return definition

"""Goal archiving service.

Moves finished days out of the live GoalProgress table into GoalHistory.
Archiving is done per timezone cohort so that each user's day is only
archived after their own local midnight.
"""
from datetime import date, datetime
from typing import Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import GoalHistory, GoalProgress, User
from services.goal_status import percentage
from services import timezone_service as tz_service


def _archive_user_goals(user_id: int, goal_date: date) -> int:
    """Copy one user's live rows for a day into history and delete them. Does not commit."""
    entries = GoalProgress.query.filter_by(user_id=user_id, goal_date=goal_date).all()
    archived = 0

    for progress in entries:
        already_archived = GoalHistory.query.filter_by(
            user_id=progress.user_id,
            task_id=progress.task_id,
            goal_date=progress.goal_date,
        ).first()

        if already_archived:
            current_app.logger.warning(
                f'Goal history already exists for user {user_id}, task {progress.task_id} '
                f'on {goal_date}; dropping the live row'
            )
        else:
            # Plain ratio for every target type, MAXIMUM included
            completion_rate = percentage(progress.current_value, progress.target_value)
            db.session.add(GoalHistory(
                user_id=progress.user_id,
                task_id=progress.task_id,
                goal_date=progress.goal_date,
                target_value=progress.target_value,
                final_value=progress.current_value,
                completion_rate=completion_rate,
                status=progress.status,
                completed_at=progress.completed_at,
            ))
            archived += 1

        db.session.delete(progress)

    return archived


def archive_goals_for_date(goal_date: date, timezone: str) -> Dict:
    """
    Archive every live goal row for ``goal_date`` of the users in ``timezone``.

    Each user is archived in its own transaction. A database error rolls back
    that user only; the user id is reported in ``failed_users`` and the
    remaining users are still archived.

    Returns:
        Dict with goal_date, timezone, users, archived and failed_users
    """
    users = User.query.filter_by(timezone=timezone).order_by(User.id).all()
    summary = {
        'goal_date': goal_date.isoformat(),
        'timezone': timezone,
        'users': len(users),
        'archived': 0,
        'failed_users': [],
    }

    for user in users:
        user_id = user.id
        try:
            archived = _archive_user_goals(user_id, goal_date)
            db.session.commit()
            summary['archived'] += archived
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f'Error archiving goals for user {user_id} on {goal_date}: {e}', exc_info=True)
            summary['failed_users'].append(user_id)

    if summary['archived']:
        current_app.logger.info(
            f"Archived {summary['archived']} goal(s) for {timezone} on {summary['goal_date']}"
        )
    return summary


def archive_pending_goals(now: Optional[datetime] = None) -> Dict:
    """
    Archive every live day that is already over in its users' timezone.

    For each timezone cohort the local date is computed, and every goal date
    with live rows strictly before it is archived. Running this again once
    caught up finds nothing to do.
    """
    timezones = [row[0] for row in db.session.query(User.timezone).distinct().all()]
    results = []

    for timezone in timezones:
        local_today = tz_service.get_user_local_date(timezone, now)
        pending_dates = [row[0] for row in (
            db.session.query(GoalProgress.goal_date)
            .join(User, GoalProgress.user_id == User.id)
            .filter(User.timezone == timezone, GoalProgress.goal_date < local_today)
            .distinct()
            .order_by(GoalProgress.goal_date)
            .all()
        )]

        for pending_date in pending_dates:
            results.append(archive_goals_for_date(pending_date, timezone))

    return {
        'runs': results,
        'archived': sum(result['archived'] for result in results),
        'failed_users': sorted({user_id for result in results for user_id in result['failed_users']}),
    }

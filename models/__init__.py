"""Database models package.

This package contains the SQLAlchemy ORM model definitions for the application.
Each model lives in its own module (user, task, progress entry and the goal
tables) and is re-exported here for convenience. The `init_default_tasks`
helper can be used to populate the database with the standard tasks and
their daily goals.
"""

# Re-export model classes from individual modules
from .user import User  # noqa: F401
from .task import Task  # noqa: F401
from .progress_entry import ProgressEntry  # noqa: F401
from .goal_definition import GoalDefinition, GoalStatus, TargetType  # noqa: F401
from .goal_progress import GoalProgress  # noqa: F401
from .goal_history import GoalHistory  # noqa: F401

__all__ = [
    "User",
    "Task",
    "ProgressEntry",
    "GoalDefinition",
    "GoalStatus",
    "TargetType",
    "GoalProgress",
    "GoalHistory",
    "init_default_tasks",
]

def init_default_tasks():
    """
    Initialize database with the default tasks and their daily goals.
    Returns the number of tasks created.
    """
    from decimal import Decimal
    from extensions import db

    default_tasks = [
        {"name": "Exercise", "unit": "minutes", "display_order": 1,
         "target_value": Decimal("30"), "target_type": TargetType.MINIMUM},
        {"name": "Reading", "unit": "pages", "display_order": 2,
         "target_value": Decimal("10"), "target_type": TargetType.MINIMUM},
        {"name": "Water", "unit": "glasses", "display_order": 3,
         "target_value": Decimal("8"), "target_type": TargetType.EXACT},
        {"name": "Meditation", "unit": "minutes", "display_order": 4,
         "target_value": Decimal("10"), "target_type": TargetType.MINIMUM},
        {"name": "Sleep", "unit": "hours", "display_order": 5,
         "target_value": Decimal("8"), "target_type": TargetType.EXACT},
        {"name": "Screen Time", "unit": "hours", "display_order": 6,
         "target_value": Decimal("2"), "target_type": TargetType.MAXIMUM},
    ]

    created = 0
    for task_data in default_tasks:
        existing = Task.query.filter_by(name=task_data["name"]).first()
        if existing:
            continue

        task = Task(
            name=task_data["name"],
            unit=task_data["unit"],
            points_per_unit=1,
            display_order=task_data["display_order"],
        )
        task.goal_definition = GoalDefinition(
            target_value=task_data["target_value"],
            target_type=task_data["target_type"],
        )
        db.session.add(task)
        created += 1

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return created

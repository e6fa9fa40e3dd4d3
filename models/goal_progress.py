"""GoalProgress model definition.
Live, per-user daily tracking row. It caches the latest recalculation and is
deleted once the day is archived into GoalHistory.
"""
from datetime import datetime
from decimal import Decimal
from extensions import db
from .goal_definition import GoalStatus

class GoalProgress(db.Model):
    __table_args__ = (
        db.UniqueConstraint('user_id', 'task_id', 'goal_date', name='uq_goal_progress_user_task_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    task_id = db.Column(db.Integer, db.ForeignKey('task.id'), nullable=False)
    goal_date = db.Column(db.Date, nullable=False, index=True)

    # Copied from the goal definition when the row is created
    target_value = db.Column(db.Numeric(10, 2), nullable=False)
    current_value = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0'))
    status = db.Column(db.Enum(GoalStatus), nullable=False, default=GoalStatus.NOT_STARTED)
    completed_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    task = db.relationship('Task')

    def __repr__(self) -> str:
        return f'<GoalProgress {self.user_id}/{self.task_id} {self.goal_date}: {self.status.value}>'

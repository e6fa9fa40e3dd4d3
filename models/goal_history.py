"""GoalHistory model definition.
Immutable archive of a finished day, written only by the goal archiver.
"""
from datetime import datetime
from extensions import db
from .goal_definition import GoalStatus

class GoalHistory(db.Model):
    __table_args__ = (
        db.UniqueConstraint('user_id', 'task_id', 'goal_date', name='uq_goal_history_user_task_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    task_id = db.Column(db.Integer, db.ForeignKey('task.id'), nullable=False)
    goal_date = db.Column(db.Date, nullable=False, index=True)
    target_value = db.Column(db.Numeric(10, 2), nullable=False)
    final_value = db.Column(db.Numeric(10, 2), nullable=False)
    completion_rate = db.Column(db.Numeric(6, 2), nullable=False, default=0)
    status = db.Column(db.Enum(GoalStatus), nullable=False)
    completed_at = db.Column(db.DateTime)
    archived_at = db.Column(db.DateTime, default=datetime.utcnow)

    task = db.relationship('Task')

    def to_dict(self) -> dict:
        return {
            'goal_date': self.goal_date.isoformat(),
            'task_id': self.task_id,
            'task_name': self.task.name if self.task else None,
            'target_value': float(self.target_value),
            'final_value': float(self.final_value),
            'completion_rate': float(self.completion_rate),
            'status': self.status.value,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }

    def __repr__(self) -> str:
        return f'<GoalHistory {self.user_id}/{self.task_id} {self.goal_date}: {self.status.value}>'

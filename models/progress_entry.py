"""ProgressEntry model definition.
One row per user, task and calendar day. The day is bucketed by the caller.
"""
from datetime import datetime
from extensions import db

class ProgressEntry(db.Model):
    __table_args__ = (
        db.UniqueConstraint('user_id', 'task_id', 'logged_date', name='uq_progress_entry_user_task_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    task_id = db.Column(db.Integer, db.ForeignKey('task.id'), nullable=False)
    logged_date = db.Column(db.Date, nullable=False)
    value = db.Column(db.Numeric(10, 2), nullable=False)
    points_earned = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'task_id': self.task_id,
            'logged_date': self.logged_date.isoformat(),
            'value': float(self.value),
            'points_earned': self.points_earned,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f'<ProgressEntry {self.user_id}/{self.task_id} {self.logged_date}: {self.value}>'

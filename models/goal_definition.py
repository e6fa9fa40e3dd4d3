"""GoalDefinition model and the enums shared by the goal tables.

A goal definition is global: every user works toward the same daily target
for a task.
"""
import enum
from datetime import datetime
from extensions import db


class TargetType(str, enum.Enum):
    EXACT = 'EXACT'
    MINIMUM = 'MINIMUM'
    MAXIMUM = 'MAXIMUM'


class GoalStatus(str, enum.Enum):
    NOT_STARTED = 'NOT_STARTED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    # For MAXIMUM goals this means the ceiling was crossed, not over-achieved.
    EXCEEDED = 'EXCEEDED'

    @property
    def is_target_reached(self) -> bool:
        return self in (GoalStatus.COMPLETED, GoalStatus.EXCEEDED)


class GoalDefinition(db.Model):
    __table_args__ = (
        db.CheckConstraint('target_value > 0', name='ck_goal_definition_target_positive'),
    )

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('task.id'), nullable=False, unique=True)
    target_value = db.Column(db.Numeric(10, 2), nullable=False)
    target_type = db.Column(db.Enum(TargetType), nullable=False, default=TargetType.MINIMUM)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f'<GoalDefinition task={self.task_id} {self.target_type.value} {self.target_value}>'

"""Task model definition.
Tasks are the shared activities users log progress against.
"""
from datetime import datetime
from extensions import db

class Task(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    unit = db.Column(db.String(30), nullable=False)
    points_per_unit = db.Column(db.Float, nullable=False, default=1)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    goal_definition = db.relationship('GoalDefinition', backref='task', uselist=False, cascade='all, delete-orphan')
    progress_entries = db.relationship('ProgressEntry', backref='task', lazy='dynamic')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'unit': self.unit,
            'points_per_unit': self.points_per_unit,
            'display_order': self.display_order,
            'is_active': self.is_active,
        }

    def __repr__(self) -> str:
        return f'<Task {self.name} ({self.unit})>'

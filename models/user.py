"""User model definition.
This module defines the User ORM model and any user-related helper methods.
"""
from datetime import datetime

from extensions import db, bcrypt

class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Daily goals reset at local midnight in this timezone
    timezone = db.Column(db.String(50), default='UTC', nullable=False, index=True)

    # Relationships
    progress_entries = db.relationship('ProgressEntry', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    goal_progress = db.relationship('GoalProgress', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    goal_history = db.relationship('GoalHistory', backref='user', lazy='dynamic', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)


    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'username': self.username,
            'timezone': self.timezone,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<User {self.email}>'

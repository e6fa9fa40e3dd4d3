"""
Pytest configuration and shared fixtures for the test suite.
"""
import pytest
from datetime import date
from decimal import Decimal
from app import create_app
from extensions import db
from models import User, Task, GoalDefinition, ProgressEntry, GoalHistory, GoalStatus, TargetType


GOAL_DATE = date(2024, 1, 15)


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app('testing')
    app.config.update({
        'SECRET_KEY': 'test-secret-key',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()

@pytest.fixture
def db_session(app):
    """Create database session."""
    with app.app_context():
        yield db.session

def make_user(db_session, email='test@example.com', username='tester', timezone='UTC'):
    user = User(email=email, username=username, timezone=timezone)
    user.set_password('password123')
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture
def test_user(db_session):
    """Create test user."""
    return make_user(db_session)

@pytest.fixture
def dubai_user(db_session):
    """Create a second user living in Asia/Dubai."""
    return make_user(db_session, email='dubai@example.com', username='dubai', timezone='Asia/Dubai')

@pytest.fixture
def goal_tasks(db_session):
    """Create one task per target type, each with an active daily goal."""
    exercise = Task(name='Exercise', unit='minutes', points_per_unit=1, display_order=1)
    exercise.goal_definition = GoalDefinition(target_value=Decimal('30'), target_type=TargetType.MINIMUM)

    water = Task(name='Water', unit='glasses', points_per_unit=2, display_order=2)
    water.goal_definition = GoalDefinition(target_value=Decimal('8'), target_type=TargetType.EXACT)

    screen_time = Task(name='Screen Time', unit='hours', points_per_unit=1, display_order=3)
    screen_time.goal_definition = GoalDefinition(target_value=Decimal('2'), target_type=TargetType.MAXIMUM)

    db_session.add_all([exercise, water, screen_time])
    db_session.commit()
    return {'exercise': exercise, 'water': water, 'screen_time': screen_time}

def add_entry(db_session, user, task, value, logged_date=GOAL_DATE):
    """Insert a progress entry directly, bypassing the logging service."""
    entry = ProgressEntry(
        user_id=user.id,
        task_id=task.id,
        logged_date=logged_date,
        value=Decimal(str(value)),
        points_earned=int(value),
    )
    db_session.add(entry)
    db_session.commit()
    return entry

def add_history(db_session, user, task, goal_date, status, completion_rate=100, final_value=None):
    """Insert an archived goal day directly."""
    target = task.goal_definition.target_value if task.goal_definition else Decimal('1')
    history = GoalHistory(
        user_id=user.id,
        task_id=task.id,
        goal_date=goal_date,
        target_value=target,
        final_value=Decimal(str(final_value)) if final_value is not None else target,
        completion_rate=completion_rate,
        status=GoalStatus(status),
    )
    db_session.add(history)
    db_session.commit()
    return history

@pytest.fixture
def logged_in_client(client, test_user):
    """Client with the test user stored in the session."""
    with client.session_transaction() as sess:
        sess['user_id'] = test_user.id
        sess['user_email'] = test_user.email
    return client

"""
Unit tests for goal history queries, summaries and streaks.
"""
import pytest
from datetime import timedelta
from models import GoalStatus
from services.exceptions import InvalidArgumentError, NotFoundError
from services.goal_history_service import calculate_streaks, get_goal_history
from tests.conftest import GOAL_DATE, add_history


def day(offset):
    return GOAL_DATE + timedelta(days=offset)


class TestCalculateStreaks:

    def test_empty(self):
        assert calculate_streaks([]) == (0, 0)

    def test_current_and_longest(self):
        statuses = [GoalStatus.COMPLETED, GoalStatus.IN_PROGRESS, GoalStatus.COMPLETED, GoalStatus.EXCEEDED]
        assert calculate_streaks(statuses) == (2, 2)

    def test_broken_current_streak(self):
        statuses = [GoalStatus.COMPLETED] * 3 + [GoalStatus.NOT_STARTED]
        assert calculate_streaks(statuses) == (0, 3)

    def test_accepts_raw_values(self):
        assert calculate_streaks(['EXCEEDED', 'COMPLETED']) == (2, 2)


class TestGetGoalHistory:

    @pytest.fixture
    def history(self, db_session, test_user, goal_tasks):
        exercise = goal_tasks['exercise']
        water = goal_tasks['water']
        add_history(db_session, test_user, exercise, day(-3), 'COMPLETED', 100)
        add_history(db_session, test_user, exercise, day(-2), 'IN_PROGRESS', 50)
        add_history(db_session, test_user, exercise, day(-1), 'COMPLETED', 100)
        add_history(db_session, test_user, exercise, day(0), 'EXCEEDED', 150)
        add_history(db_session, test_user, water, day(0), 'NOT_STARTED', 0)
        return goal_tasks

    def test_unknown_user(self, db_session):
        with pytest.raises(NotFoundError):
            get_goal_history(9999)

    @pytest.mark.parametrize('kwargs', [
        {'limit': 0},
        {'offset': -1},
        {'start_date': day(1), 'end_date': day(0)},
    ])
    def test_invalid_arguments(self, db_session, test_user, kwargs):
        with pytest.raises(InvalidArgumentError):
            get_goal_history(test_user.id, **kwargs)

    def test_empty_history(self, db_session, test_user):
        result = get_goal_history(test_user.id)
        assert result['history'] == []
        assert result['pagination'] == {'limit': 30, 'offset': 0, 'total': 0, 'has_more': False}
        assert result['summary'] == {
            'total_days': 0,
            'completed_days': 0,
            'average_completion_rate': 0,
            'streak': {'current': 0, 'longest': 0},
        }

    def test_newest_first_then_display_order(self, db_session, test_user, history):
        result = get_goal_history(test_user.id)

        order = [(row['goal_date'], row['task_name']) for row in result['history']]
        assert order == [
            ('2024-01-15', 'Exercise'),
            ('2024-01-15', 'Water'),
            ('2024-01-14', 'Exercise'),
            ('2024-01-13', 'Exercise'),
            ('2024-01-12', 'Exercise'),
        ]

    def test_task_filter_and_streaks(self, db_session, test_user, history):
        result = get_goal_history(test_user.id, task_id=history['exercise'].id)

        assert result['pagination']['total'] == 4
        assert result['summary']['total_days'] == 4
        assert result['summary']['completed_days'] == 3
        assert result['summary']['average_completion_rate'] == 100
        assert result['summary']['streak'] == {'current': 2, 'longest': 2}

    def test_single_day_range(self, db_session, test_user, history):
        result = get_goal_history(test_user.id, start_date=day(0), end_date=day(0))

        assert {row['task_name'] for row in result['history']} == {'Exercise', 'Water'}
        assert result['summary']['total_days'] == 2
        assert result['summary']['completed_days'] == 1

    def test_open_ended_range(self, db_session, test_user, history):
        result = get_goal_history(test_user.id, start_date=day(-1), task_id=history['exercise'].id)
        assert [row['goal_date'] for row in result['history']] == ['2024-01-15', '2024-01-14']

        result = get_goal_history(test_user.id, end_date=day(-2))
        assert [row['goal_date'] for row in result['history']] == ['2024-01-13', '2024-01-12']

    def test_pagination(self, db_session, test_user, history):
        first = get_goal_history(test_user.id, limit=2)
        last = get_goal_history(test_user.id, limit=2, offset=4)

        assert len(first['history']) == 2
        assert first['pagination'] == {'limit': 2, 'offset': 0, 'total': 5, 'has_more': True}
        assert len(last['history']) == 1
        assert last['pagination']['has_more'] is False

    def test_summary_covers_full_filtered_set(self, db_session, test_user, history):
        result = get_goal_history(test_user.id, limit=1)

        assert len(result['history']) == 1
        assert result['summary']['total_days'] == 5
        assert result['summary']['completed_days'] == 3
        assert result['summary']['average_completion_rate'] == 80

    def test_average_is_rounded(self, db_session, test_user, goal_tasks):
        exercise = goal_tasks['exercise']
        add_history(db_session, test_user, exercise, day(-2), 'IN_PROGRESS', 33.33)
        add_history(db_session, test_user, exercise, day(-1), 'IN_PROGRESS', 33.33)
        add_history(db_session, test_user, exercise, day(0), 'IN_PROGRESS', 33.34)

        result = get_goal_history(test_user.id)
        assert result['summary']['average_completion_rate'] == 33.33

    def test_gaps_do_not_break_streaks(self, db_session, test_user, goal_tasks):
        exercise = goal_tasks['exercise']
        add_history(db_session, test_user, exercise, day(-10), 'COMPLETED')
        add_history(db_session, test_user, exercise, day(0), 'COMPLETED')

        result = get_goal_history(test_user.id)
        assert result['summary']['streak'] == {'current': 2, 'longest': 2}

    def test_other_users_are_excluded(self, db_session, test_user, dubai_user, history):
        add_history(db_session, dubai_user, history['exercise'], day(0), 'COMPLETED')

        assert get_goal_history(dubai_user.id)['pagination']['total'] == 1
        assert get_goal_history(test_user.id)['pagination']['total'] == 5

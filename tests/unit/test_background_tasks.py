"""
Unit tests for the background archive scheduler.
"""
import pytest
from datetime import datetime, timedelta
from unittest.mock import patch
import pytz
import schedule
import run_background_tasks
from models import GoalHistory, GoalProgress
from services import goal_service
from services.background_tasks import BackgroundTaskProcessor
from tests.conftest import GOAL_DATE


NOW = pytz.UTC.localize(datetime(2024, 1, 15, 12, 0))


class TestBackgroundTaskProcessor:

    def test_schedules_archive_job_on_private_scheduler(self, app):
        global_jobs = list(schedule.jobs)
        processor = BackgroundTaskProcessor(app)

        assert processor.scheduler is not schedule.default_scheduler
        assert schedule.jobs == global_jobs
        assert len(processor.scheduler.jobs) == 1

        job = processor.scheduler.jobs[0]
        assert job.interval == app.config['GOAL_ARCHIVE_INTERVAL_MINUTES']
        assert job.unit == 'minutes'

    def test_without_app_nothing_is_scheduled(self):
        processor = BackgroundTaskProcessor()
        assert processor.scheduler.jobs == []

    def test_archive_finished_goals(self, app, db_session, test_user, goal_tasks):
        goal_service.calculate_daily_progress(test_user.id, GOAL_DATE - timedelta(days=1))
        goal_service.calculate_daily_progress(test_user.id, GOAL_DATE)

        result = BackgroundTaskProcessor(app).archive_finished_goals(now=NOW)

        assert result['archived'] == 3
        assert result['failed_users'] == []
        assert GoalHistory.query.count() == 3
        assert {row.goal_date for row in GoalProgress.query.all()} == {GOAL_DATE}

    def test_archive_errors_are_logged_not_raised(self, app):
        processor = BackgroundTaskProcessor(app)

        with patch('services.background_tasks.archive_pending_goals', side_effect=RuntimeError('boom')), \
                patch('services.background_tasks.logger') as logger:
            assert processor.archive_finished_goals(now=NOW) is None

        logger.error.assert_called_once()


class TestRunBackgroundTasks:

    @pytest.fixture
    def processor(self):
        with patch.object(run_background_tasks, 'setup_background_logger'), \
                patch.object(run_background_tasks, 'create_app'), \
                patch.object(run_background_tasks, 'BackgroundTaskProcessor') as processor_class:
            yield processor_class.return_value

    def test_once_exits_cleanly(self, processor):
        processor.archive_finished_goals.return_value = {'runs': [], 'archived': 0, 'failed_users': []}

        with pytest.raises(SystemExit) as excinfo:
            run_background_tasks.main(['--once'])

        assert excinfo.value.code == 0
        processor.run_scheduler.assert_not_called()

    def test_once_reports_failed_users(self, processor):
        processor.archive_finished_goals.return_value = {'runs': [], 'archived': 0, 'failed_users': [3]}

        with pytest.raises(SystemExit) as excinfo:
            run_background_tasks.main(['--once'])

        assert excinfo.value.code == 1

    def test_scheduler_loop_interrupted(self, processor):
        processor.run_scheduler.side_effect = KeyboardInterrupt

        with pytest.raises(SystemExit) as excinfo:
            run_background_tasks.main([])

        assert excinfo.value.code == 0

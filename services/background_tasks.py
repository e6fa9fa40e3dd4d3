"""Background Tasks Service.
Handles periodic tasks like archiving finished goal days into history.
"""
import schedule
import time
import logging
from datetime import datetime
from services.goal_archive_service import archive_pending_goals


logger = logging.getLogger('background_tasks')


class BackgroundTaskProcessor:

    def __init__(self, app=None, scheduler=None):
        self.app = app
        # A private scheduler keeps jobs out of the schedule module's global one
        self.scheduler = scheduler or schedule.Scheduler()

        if app:
            self.init_app(app)

    def init_app(self, app):
        """Initialize with Flask app"""
        self.app = app

        # Schedule tasks
        interval = app.config.get('GOAL_ARCHIVE_INTERVAL_MINUTES', 15)
        self.scheduler.every(interval).minutes.do(self.archive_finished_goals)

    def run_scheduler(self):
        """Run the background scheduler (should be called in a separate process/thread)"""
        with self.app.app_context():
            logger.info("Background task scheduler started")

            # Catch up on anything left over while the runner was down
            self.archive_finished_goals()

            while True:
                try:
                    self.scheduler.run_pending()
                    time.sleep(5)
                except Exception as e:
                    logger.error(f"Background scheduler error: {e}", exc_info=True)
                    time.sleep(5)

    def archive_finished_goals(self, now: datetime = None):
        """Archive every goal day that has passed local midnight for its users."""
        logger.debug("Checking for finished goal days...")
        try:
            with self.app.app_context():
                result = archive_pending_goals(now)
                if result['archived'] > 0:
                    logger.info(f"Archived {result['archived']} goal progress row(s) in {len(result['runs'])} run(s)")
                else:
                    logger.debug("No goal days to archive.")
                if result['failed_users']:
                    logger.warning(f"Goal archiving failed for users: {result['failed_users']}")
                return result
        except Exception as e:
            logger.error(f"Error archiving goals: {e}", exc_info=True)
            return None



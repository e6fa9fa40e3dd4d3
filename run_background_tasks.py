#!/usr/bin/env python3
"""
Background Tasks Runner for the Habit Tracker
Archives goal days that are over in each user's timezone into goal history.

Usage:
    python run_background_tasks.py          - run the scheduler loop
    python run_background_tasks.py --once   - run a single archive sweep (for cron)
"""
import argparse
import os
import sys
import logging
from app import create_app
from services.background_tasks import BackgroundTaskProcessor

def setup_background_logger():
    """Sets up a dedicated logger for background tasks."""
    logger = logging.getLogger('background_tasks')
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        log_dir = 'logs'
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

        file_handler = logging.FileHandler(os.path.join(log_dir, 'background_tasks.log'))
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger

def main(argv=None):
    """Main entry point for background tasks"""
    parser = argparse.ArgumentParser(description='Habit Tracker background tasks')
    parser.add_argument('--once', action='store_true', help='run one archive sweep and exit')
    args = parser.parse_args(argv)

    logger = setup_background_logger()
    logger.info("Starting Habit Tracker Background Tasks...")

    app = create_app()
    processor = BackgroundTaskProcessor(app)

    try:
        if args.once:
            result = processor.archive_finished_goals()
            sys.exit(0 if result is not None and not result['failed_users'] else 1)
        processor.run_scheduler()
    except KeyboardInterrupt:
        logger.info("Background tasks stopped by user.")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error running background tasks: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()

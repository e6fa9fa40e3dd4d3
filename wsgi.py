"""
WSGI entry point for the Habit Tracker API.
Point gunicorn or uWSGI at ``wsgi:application``; the background archiver
runs separately via ``run_background_tasks.py``.
"""
from app import create_app

application = create_app()

from flask import Flask, jsonify
from config import get_config
from extensions import db, migrate, bcrypt
from services.exceptions import GoalServiceError
from services.leaderboard_service import LeaderboardCache
import logging
from logging.handlers import RotatingFileHandler
import os
import sys

def create_app(config_name=None):
    app = Flask(__name__)

    # Get configuration based on environment or passed parameter
    if config_name:
        from config import config
        app.config.from_object(config[config_name])
    else:
        app.config.from_object(get_config())

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    app.extensions['leaderboard_cache'] = LeaderboardCache(app.config['LEADERBOARD_CACHE_TTL_SECONDS'])

    # Import models to register them with SQLAlchemy
    from models import User, Task, GoalDefinition, ProgressEntry, GoalProgress, GoalHistory  # noqa: F401

    configure_logging(app)

    # Register blueprints
    from routes.auth import auth_bp
    from routes.goals import goals_bp
    from routes.progress import progress_bp
    from routes.leaderboard import leaderboard_bp
    from routes.user import user_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(goals_bp, url_prefix='/api/goals')
    app.register_blueprint(progress_bp, url_prefix='/api/progress')
    app.register_blueprint(leaderboard_bp, url_prefix='/api/leaderboard')
    app.register_blueprint(user_bp, url_prefix='/api/user')

    @app.route('/')
    def index():
        return jsonify({'success': True, 'service': 'habit-tracker'})

    # Error handlers
    @app.errorhandler(GoalServiceError)
    def goal_service_error(error):
        return jsonify({'success': False, 'error': error.to_dict()}), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'error': {'code': 'NOT_FOUND', 'message': 'Resource not found'}}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'success': False, 'error': {'code': 'INTERNAL_ERROR', 'message': 'Something went wrong!'}}), 500

    return app


def configure_logging(app):
    """Attach file or stdout handlers to the app logger."""
    if app.testing:
        return

    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)
    formatter = logging.Formatter('%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    if app.config.get('LOG_TO_STDOUT'):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(log_level)
        app.logger.addHandler(stream_handler)
    elif not app.debug:
        if not os.path.exists('logs'):
            os.mkdir('logs')
        file_handler = RotatingFileHandler('logs/habit_tracker.log', maxBytes=10240, backupCount=10)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        app.logger.addHandler(file_handler)

    app.logger.setLevel(log_level)
    app.logger.info('Habit Tracker startup')

import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Base settings, read from the environment (or a .env file)."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///habit_tracker.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session configuration
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = int(os.environ.get('SESSION_LIFETIME', 86400))  # 24 hours default

    # Timezone given to users who register without one
    DEFAULT_TIMEZONE = os.environ.get('DEFAULT_TIMEZONE', 'UTC')

    # Background archiving of finished goal days
    GOAL_ARCHIVE_INTERVAL_MINUTES = int(os.environ.get('GOAL_ARCHIVE_INTERVAL_MINUTES', 15))

    # Goal history pagination
    GOAL_HISTORY_PAGE_SIZE = int(os.environ.get('GOAL_HISTORY_PAGE_SIZE', 30))
    GOAL_HISTORY_MAX_PAGE_SIZE = int(os.environ.get('GOAL_HISTORY_MAX_PAGE_SIZE', 100))

    # Leaderboard standings are cached in memory for this long
    LEADERBOARD_CACHE_TTL_SECONDS = int(os.environ.get('LEADERBOARD_CACHE_TTL_SECONDS', 180))
    LEADERBOARD_SIZE = int(os.environ.get('LEADERBOARD_SIZE', 100))

    # Logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT', 'False').lower() == 'true'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Debug mode - automatically set based on environment
    @property
    def DEBUG(self):
        env = os.environ.get('FLASK_ENV', 'development').lower()
        return env == 'development'

    TESTING = False

class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'WARNING').upper()

class DevelopmentConfig(Config):
    DEBUG = True

class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    BCRYPT_LOG_ROUNDS = 4
    DEFAULT_TIMEZONE = 'UTC'

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}

def get_config():
    """Get configuration based on environment variable"""
    env = os.environ.get('FLASK_ENV', 'development').lower()
    return config.get(env, config['default'])

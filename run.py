"""Development server for the Habit Tracker API."""
import os
from app import create_app

application = create_app()

if __name__ == '__main__':
    host = os.environ.get('FLASK_HOST', '0.0.0.0')
    port = int(os.environ.get('FLASK_PORT', 5050))

    application.logger.info(
        f"Serving Habit Tracker API on {host}:{port} "
        f"({os.environ.get('FLASK_ENV', 'development')}, database={application.config['SQLALCHEMY_DATABASE_URI']})"
    )
    application.run(debug=application.config.get('DEBUG', False), host=host, port=port)

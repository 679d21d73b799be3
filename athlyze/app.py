import logging
import os

from flask import Flask, render_template

from athlyze.config import Config
from athlyze.models.database import FitnessDatabase
from athlyze.utils.advisor import FitnessAdvisor
from athlyze.routes.auth_routes import register_auth_routes
from athlyze.routes.dashboard_routes import register_dashboard_routes
from athlyze.routes.activity_routes import register_activity_routes
from athlyze.routes.report_routes import register_report_routes
from athlyze.routes.suggestion_routes import register_suggestion_routes
from athlyze.routes.api_routes import register_api_routes
from athlyze.utils.helpers import clean_number, activity_label, format_measurements, current_user

logger = logging.getLogger(__name__)


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if isinstance(config, dict):
        app.config.update(config)
    elif config is not None:
        app.config.from_object(config)

    logging.basicConfig(level=app.config['LOG_LEVEL'])

    if app.config['SECRET_KEY'] == Config.SECRET_KEY and os.environ.get('FLASK_ENV') == 'production':
        raise RuntimeError('ATHLYZE_SECRET_KEY must be set in production.')

    db = FitnessDatabase(app.config['DATABASE_PATH'])
    advisor = FitnessAdvisor(db)
    app.extensions['athlyze.db'] = db
    app.extensions['athlyze.advisor'] = advisor

    app.jinja_env.filters['clean_number'] = clean_number
    app.jinja_env.filters['activity_label'] = activity_label
    app.jinja_env.filters['format_measurements'] = format_measurements

    @app.context_processor
    def inject_user():
        user = current_user()
        return {'user': user, 'logged_in': user is not None}

    register_auth_routes(app, db, advisor)
    register_dashboard_routes(app, db)
    register_activity_routes(app, db, advisor)
    register_report_routes(app, db)
    register_suggestion_routes(app, db, advisor)
    register_api_routes(app, db)

    @app.errorhandler(404)
    def not_found(error):
        return render_template('404.html'), 404

    @app.errorhandler(500)
    def server_error(error):
        original = getattr(error, 'original_exception', None) or error
        logger.exception('Unhandled error: %s', original)
        return render_template('500.html', error=original if app.debug else None), 500

    logger.info('Athlyze started with database %s', app.config['DATABASE_PATH'])
    return app

import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.environ.get('ATHLYZE_SECRET_KEY', 'dev-secret-key')
    DATABASE_PATH = os.environ.get('ATHLYZE_DATABASE', 'data/athlyze.db')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 3000))
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
    TESTING = False

    PAGE_SIZE = 10

    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', '0') == '1'


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    LOG_LEVEL = 'WARNING'

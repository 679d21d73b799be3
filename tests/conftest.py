from datetime import date, timedelta

import pytest

from athlyze.app import create_app
from athlyze.config import TestingConfig
from athlyze.models.database import FitnessDatabase

PASSWORD = 'secret123'


def days_ago(n):
    return (date.today() - timedelta(days=n)).isoformat()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / 'athlyze-test.db')


@pytest.fixture
def db(db_path):
    return FitnessDatabase(db_path)


@pytest.fixture
def app(db_path):
    class Config(TestingConfig):
        DATABASE_PATH = db_path
    return create_app(Config)


@pytest.fixture
def app_db(app):
    return app.extensions['athlyze.db']


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, name='Ana', email='ana@example.com', password=PASSWORD, confirm=None, **extra):
    form = {
        'name': name,
        'email': email,
        'password': password,
        'confirm_password': password if confirm is None else confirm,
    }
    form.update(extra)
    return client.post('/register', data=form)


@pytest.fixture
def auth_client(client):
    response = register(client)
    assert response.status_code == 302
    return client


@pytest.fixture
def user_id(auth_client):
    with auth_client.session_transaction() as sess:
        return sess['user_id']

"""
Pytest configuration for storefront tests
"""

import pytest
from fastapi.testclient import TestClient

from storefront.DB import Database
from storefront.main import create_app
from storefront.services import AuthService, CatalogService
from storefront.settings import Settings

PASSWORD = 'secret1'


def make_settings(**overrides) -> Settings:
    values = {
        'DATABASE_URL': 'sqlite://',
        'SECRET_KEY': 'test-secret-key-for-the-storefront-suite',
        'LOG_LEVEL': 'WARNING',
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.connect()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as session:
        yield session


@pytest.fixture
def auth(session, settings):
    return AuthService(session, settings)


@pytest.fixture
def catalog(session, auth, settings):
    return CatalogService(session, auth, settings)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def user(client):
    response = client.post(
        '/api/users/register',
        json={'email': 'shopper@example.com', 'password': PASSWORD, 'name': 'Shopper'},
    )
    assert response.status_code == 201
    data = response.json()
    return {**data['user'], 'password': PASSWORD, 'token': data['token']}


@pytest.fixture
def token(user):
    return user['token']


@pytest.fixture
def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}

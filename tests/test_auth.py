from http import HTTPStatus

import pytest
from fastapi.testclient import TestClient

from storefront.main import create_app
from storefront.security import create_access_token


def test_register_alias(client):
    response = client.post(
        '/auth/register',
        json={'email': 'a@x.com', 'password': 'secret1', 'name': 'Ana'},
    )

    assert response.status_code == HTTPStatus.CREATED
    assert response.json()['user']['name'] == 'Ana'


def test_login_alias(client, user):
    response = client.post(
        '/auth/login',
        json={'email': user['email'], 'password': user['password']},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.json()['token_type'] == 'bearer'


def test_auth_aliases_share_the_users_endpoints(app):
    endpoints = {
        (route.path, tuple(sorted(route.methods))): route.endpoint
        for route in app.routes
        if hasattr(route, 'methods')
    }

    for action in ('register', 'login'):
        assert (
            endpoints[(f'/auth/{action}', ('POST',))]
            is endpoints[(f'/api/users/{action}', ('POST',))]
        )


def test_oauth2_token_form(client, user):
    response = client.post(
        '/auth/token',
        data={'username': user['email'], 'password': user['password']},
    )

    assert response.status_code == HTTPStatus.OK
    token = response.json()
    assert token['token_type'] == 'bearer'

    profile = client.get(
        '/api/users/profile',
        headers={'Authorization': f"Bearer {token['access_token']}"},
    )
    assert profile.json()['email'] == user['email']


def test_oauth2_token_form_wrong_password(client, user):
    response = client.post(
        '/auth/token',
        data={'username': user['email'], 'password': 'wrong'},
    )

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json()['error']['kind'] == 'InvalidCredentials'


def test_refresh_token(client, token, auth_headers):
    response = client.post('/auth/refresh_token', headers=auth_headers)

    assert response.status_code == HTTPStatus.OK
    new_token = response.json()['token']
    assert new_token != token


def test_refresh_token_requires_a_session(client):
    response = client.post('/auth/refresh_token')

    assert response.status_code == HTTPStatus.UNAUTHORIZED


def test_token_expired(client, settings_factory, user):
    expired = settings_factory(ACCESS_TOKEN_EXPIRE_MINUTES=-1)

    token = create_access_token({'sub': str(user['id'])}, expired)
    response = client.get('/api/users/profile', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json()['error'] == {
        'kind': 'Unauthenticated',
        'message': 'Could not validate credentials',
    }


def test_stateless_logout_does_not_revoke(client, auth_headers):
    response = client.post('/auth/logout', headers=auth_headers)

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {'revoked': False}
    assert client.get('/api/users/profile', headers=auth_headers).status_code == HTTPStatus.OK


@pytest.fixture
def revocable_client(settings_factory):
    app = create_app(settings_factory(SESSION_BACKEND='revocable'))
    with TestClient(app) as client:
        yield client


def test_revocable_logout(revocable_client):
    registered = revocable_client.post(
        '/api/users/register', json={'email': 'a@x.com', 'password': 'secret1'}
    ).json()
    headers = {'Authorization': f"Bearer {registered['token']}"}

    response = revocable_client.post('/auth/logout', headers=headers)
    assert response.json() == {'revoked': True}

    profile = revocable_client.get('/api/users/profile', headers=headers)
    assert profile.status_code == HTTPStatus.UNAUTHORIZED
    assert profile.json()['error']['kind'] == 'Unauthenticated'

    login = revocable_client.post(
        '/api/users/login', json={'email': 'a@x.com', 'password': 'secret1'}
    )
    fresh = {'Authorization': f"Bearer {login.json()['token']}"}
    assert revocable_client.get('/api/users/profile', headers=fresh).status_code == HTTPStatus.OK

from http import HTTPStatus


def test_register(client):
    response = client.post(
        '/api/users/register',
        json={'email': 'a@x.com', 'password': 'secret1'},
    )

    assert response.status_code == HTTPStatus.CREATED
    data = response.json()
    assert data['token']
    assert data['token_type'] == 'bearer'
    assert data['user']['email'] == 'a@x.com'
    assert data['user']['name'] is None
    assert isinstance(data['user']['id'], int)
    assert 'password_hash' not in data['user']
    assert 'password' not in data['user']


def test_register_duplicate_email(client, user):
    response = client.post(
        '/api/users/register',
        json={'email': user['email'].upper(), 'password': 'different1'},
    )

    assert response.status_code == HTTPStatus.CONFLICT
    assert response.json()['error']['kind'] == 'DuplicateEmail'


def test_register_invalid_email(client):
    response = client.post(
        '/api/users/register',
        json={'email': 'not-an-email', 'password': 'secret1'},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json()['error']['kind'] == 'InvalidInput'


def test_register_short_password(client):
    response = client.post(
        '/api/users/register',
        json={'email': 'a@x.com', 'password': '123'},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json()['error']['kind'] == 'InvalidInput'
    assert '123' not in response.text


def test_register_missing_fields(client):
    response = client.post('/api/users/register', json={'email': 'a@x.com'})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json()['error']['message'].startswith('password')


def test_login(client, user):
    response = client.post(
        '/api/users/login',
        json={'email': user['email'], 'password': user['password']},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.json()['token']


def test_login_wrong_password_and_unknown_email_are_indistinguishable(client, user):
    wrong_password = client.post(
        '/api/users/login',
        json={'email': user['email'], 'password': 'wrong'},
    )
    unknown_email = client.post(
        '/api/users/login',
        json={'email': 'nobody@example.com', 'password': user['password']},
    )

    assert wrong_password.status_code == unknown_email.status_code == HTTPStatus.UNAUTHORIZED
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()['error']['kind'] == 'InvalidCredentials'


def test_profile(client, user, auth_headers):
    response = client.get('/api/users/profile', headers=auth_headers)

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {'id': user['id'], 'email': user['email'], 'name': 'Shopper'}


def test_profile_without_token(client):
    response = client.get('/api/users/profile')

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.headers['www-authenticate'] == 'Bearer'
    assert response.json()['error']['kind'] == 'Unauthenticated'


def test_profile_with_invalid_token(client):
    response = client.get('/api/users/profile', headers={'Authorization': 'Bearer garbage'})

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json()['error']['kind'] == 'Unauthenticated'

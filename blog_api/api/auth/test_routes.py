# blog_api/api/auth/test_routes.py
"""
회원가입/로그인/내 정보 조회 테스트

사용법: python -m pytest blog_api/api/auth/test_routes.py -v
"""

REGISTER_PAYLOAD = {
    "email": "new@example.com",
    "password": "password1",
    "fullName": "New Member",
}


def test_register_returns_user_and_token(client, user_store):
    response = client.post('/auth/register', json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    body = response.get_json()
    assert body['email'] == "new@example.com"
    assert body['fullName'] == "New Member"
    assert body['avatarUrl'] is None
    assert body['token']
    assert 'password' not in body
    assert 'passwordHash' not in body

    stored = user_store.find_by_email("new@example.com")
    assert stored['password_hash'] != "password1"


def test_register_duplicate_email(client):
    client.post('/auth/register', json=REGISTER_PAYLOAD)
    response = client.post('/auth/register', json=REGISTER_PAYLOAD)
    assert response.status_code == 409
    assert response.get_json()['error_code'] == "EMAIL_ALREADY_EXISTS"


def test_register_validation(client):
    response = client.post('/auth/register', json={"email": "not-an-email", "password": "123", "fullName": "ab", "avatarUrl": "nope"})
    assert response.status_code == 400
    assert set(response.get_json()['details']) == {"email", "password", "fullName", "avatarUrl"}


def test_login_success_and_me(client, author):
    response = client.post('/auth/login', json={"email": author['email'], "password": "secret123"})
    assert response.status_code == 200
    token = response.get_json()['token']

    me = client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    assert me.get_json()['id'] == author['user_id']
    assert me.get_json()['email'] == author['email']


def test_login_wrong_password(client, author):
    response = client.post('/auth/login', json={"email": author['email'], "password": "wrong-pass"})
    assert response.status_code == 400
    assert response.get_json()['error_code'] == "INVALID_CREDENTIALS"


def test_login_unknown_user(client):
    response = client.post('/auth/login', json={"email": "nobody@example.com", "password": "whatever"})
    assert response.status_code == 404


def test_me_without_token(client):
    response = client.get('/auth/me')
    assert response.status_code == 403


def test_me_for_deleted_user(client, auth_headers, user_store):
    user_store.docs.clear()
    response = client.get('/auth/me', headers=auth_headers)
    assert response.status_code == 404

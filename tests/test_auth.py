"""Registration, login and bearer token handling."""

from datetime import timedelta

from jose import jwt

from conftest import PASSWORD, auth_headers
from mms.extensions import db
from mms.models import User
from mms.services.helpers import utcnow


def register(client, **overrides):
    payload = {'name': 'New Person', 'email': 'New.Person@Example.com', 'password': 'Secret123'}
    payload.update(overrides)
    return client.post('/api/v1/auth/register', json=payload)


class TestRegistration:

    def test_register_returns_user_and_token(self, client):
        response = register(client)

        assert response.status_code == 201
        body = response.get_json()
        assert body['success'] is True
        assert body['message'] == 'User registered successfully'
        assert body['timestamp'].endswith('Z')
        assert body['data']['user']['email'] == 'new.person@example.com'
        assert body['data']['user']['role'] == 'Member'
        assert 'password' not in body['data']['user']
        assert body['data']['token']

    def test_duplicate_email_conflicts(self, client):
        register(client)
        response = register(client, email='new.person@example.com')

        assert response.status_code == 409
        assert response.get_json()['message'] == 'User already exists with this email'

    def test_weak_password_rejected(self, client):
        response = register(client, password='lowercase1')

        assert response.status_code == 400
        body = response.get_json()
        assert body['success'] is False
        assert 'Password must contain' in body['message']

    def test_public_registration_cannot_create_admin(self, client):
        response = register(client, role='Admin')

        assert response.status_code == 400
        assert 'Admin accounts cannot be created through public registration' in response.get_json()['message']
        assert db.session.query(User).count() == 0

    def test_validation_errors_are_joined(self, client):
        response = client.post('/api/v1/auth/register', json={'name': 'x', 'email': 'nope', 'password': '1'})

        assert response.status_code == 400
        message = response.get_json()['message']
        assert 'name' in message
        assert 'email' in message
        assert ', ' in message

    def test_non_object_body_rejected(self, client):
        response = client.post('/api/v1/auth/register', json=['not', 'an', 'object'])

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Request body must be a JSON object'


class TestLogin:

    def test_login_success(self, client, admin):
        response = client.post('/api/v1/auth/login', json={'email': 'ADMIN@example.com', 'password': PASSWORD})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['user']['id'] == admin.id
        assert data['user']['role'] == 'Admin'
        assert data['token']

    def test_wrong_password_and_unknown_email_look_the_same(self, client, admin):
        wrong = client.post('/api/v1/auth/login', json={'email': 'admin@example.com', 'password': 'Wrong123'})
        unknown = client.post('/api/v1/auth/login', json={'email': 'ghost@example.com', 'password': PASSWORD})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.get_json()['message'] == unknown.get_json()['message'] == 'Invalid credentials'

    def test_deactivated_account(self, client, admin):
        admin.is_active = False
        db.session.commit()

        response = client.post('/api/v1/auth/login', json={'email': 'admin@example.com', 'password': PASSWORD})

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Account is deactivated'


class TestTokens:

    def test_profile_requires_token(self, client):
        response = client.get('/api/v1/auth/profile')

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Access denied. No token provided.'

    def test_garbage_token(self, client):
        response = client.get('/api/v1/auth/profile', headers=auth_headers('not-a-token'))

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid or expired token.'

    def test_expired_token(self, app, client, admin):
        issued = utcnow() - timedelta(days=10)
        token = jwt.encode(
            {'id': admin.id, 'iat': int(issued.timestamp()), 'exp': int((issued + timedelta(days=1)).timestamp())},
            app.config['JWT_SECRET'],
            algorithm='HS256',
        )

        response = client.get('/api/v1/auth/profile', headers=auth_headers(token))

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid or expired token.'

    def test_token_for_deactivated_user(self, client, admin, admin_headers):
        admin.is_active = False
        db.session.commit()

        response = client.get('/api/v1/auth/profile', headers=admin_headers)

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Account is deactivated.'

    def test_profile(self, client, admin, admin_headers):
        response = client.get('/api/v1/auth/profile', headers=admin_headers)

        assert response.status_code == 200
        user = response.get_json()['data']['user']
        assert user['email'] == 'admin@example.com'
        assert user['isActive'] is True

    def test_token_lifetime_follows_config(self, app, admin):
        from mms.services.auth import auth_service

        app.config['JWT_EXPIRES_IN'] = '2h'
        claims = auth_service.decode_token(auth_service.generate_token(admin.id))

        assert claims['id'] == admin.id
        assert claims['exp'] - claims['iat'] == 2 * 60 * 60


class TestSystem:

    def test_health(self, client):
        response = client.get('/api/v1/health')

        assert response.status_code == 200
        assert response.get_json()['success'] is True
        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['X-Frame-Options'] == 'DENY'

    def test_status(self, client):
        response = client.get('/api/v1/status')

        assert response.status_code == 200
        assert response.get_json()['data']['services']['database'] == 'connected'

    def test_unknown_endpoint(self, client):
        response = client.get('/api/v1/nowhere')

        assert response.status_code == 404
        assert response.get_json()['message'] == 'API endpoint /api/v1/nowhere not found'

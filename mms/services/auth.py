"""Registration, login and bearer token handling."""

from __future__ import annotations

from typing import Any

from flask import current_app
from jose import jwt

from mms.extensions import db
from mms.models import User, UserRole
from mms.services.errors import AuthenticationError, ConflictError, NotFoundError
from mms.services.helpers import parse_duration, utcnow
from mms.services.serializers import serialize_user


class AuthService:
    """Stateless account operations backed by the User table."""

    def generate_token(self, user_id: str) -> str:
        lifetime = parse_duration(current_app.config.get('JWT_EXPIRES_IN', '7d'))
        issued = utcnow()
        payload = {
            'id': user_id,
            'iat': int(issued.timestamp()),
            'exp': int((issued + lifetime).timestamp()),
        }
        return jwt.encode(
            payload,
            current_app.config['JWT_SECRET'],
            algorithm=current_app.config.get('JWT_ALGORITHM', 'HS256'),
        )

    def decode_token(self, token: str) -> dict[str, Any]:
        """
        Verify a bearer token and return its claims.

        Raises:
            jose.ExpiredSignatureError: If the token has expired
            jose.JWTError: If the token is malformed or the signature is wrong
        """
        return jwt.decode(
            token,
            current_app.config['JWT_SECRET'],
            algorithms=[current_app.config.get('JWT_ALGORITHM', 'HS256')],
        )

    def register(self, data: dict[str, Any]) -> dict[str, Any]:
        email = data['email'].strip().lower()
        if User.query.filter_by(email=email).first():
            raise ConflictError('User already exists with this email')

        user = User(
            name=data['name'].strip(),
            email=email,
            role=UserRole(data.get('role') or UserRole.MEMBER),
        )
        user.set_password(data['password'])
        db.session.add(user)
        db.session.commit()
        current_app.logger.info(f"Registered user {user.email} ({user.role.value})")

        return {'user': serialize_user(user), 'token': self.generate_token(user.id)}

    def login(self, email: str, password: str) -> dict[str, Any]:
        user = User.query.filter_by(email=email.strip().lower()).first()
        # Same message for unknown email and wrong password
        if user is None or not user.check_password(password):
            raise AuthenticationError('Invalid credentials')
        if not user.is_active:
            raise AuthenticationError('Account is deactivated')

        return {'user': serialize_user(user), 'token': self.generate_token(user.id)}

    def get_profile(self, user_id: str) -> User:
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError('User not found')
        return user


auth_service = AuthService()

__all__ = ["AuthService", "auth_service"]

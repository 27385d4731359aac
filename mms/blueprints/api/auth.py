"""Registration, login and the caller's own profile."""

from __future__ import annotations

from flask import Blueprint, g

from mms.blueprints.api.validation import body_data, validate_body
from mms.extensions import limiter
from mms.schemas.auth import LoginSchema, RegisterSchema
from mms.security import token_required
from mms.security.config import auth_rate_limit
from mms.responses import success_response
from mms.services.auth import auth_service
from mms.services.serializers import serialize_user

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
@validate_body(RegisterSchema)
def register():
    result = auth_service.register(body_data())
    return success_response('User registered successfully', result, 201)


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(auth_rate_limit)
@validate_body(LoginSchema)
def login():
    data = body_data()
    result = auth_service.login(data['email'], data['password'])
    return success_response('Login successful', result)


@auth_bp.route('/profile', methods=['GET'])
@token_required
def profile():
    user = auth_service.get_profile(g.current_user.id)
    return success_response('Profile retrieved successfully', {'user': serialize_user(user)})

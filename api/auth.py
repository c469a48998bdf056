"""
Authentication blueprint:
- POST  /auth/register
- POST  /auth/login
- POST  /auth/refresh
- POST  /auth/logout
- GET   /auth/profile
- PATCH /auth/profile
- PATCH /auth/password

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived JWT access tokens and long-lived opaque refresh tokens
- Stores refresh tokens in DB (RefreshToken model), rotating them on every refresh
"""
from __future__ import annotations

from flask import Blueprint, request, g, current_app

from models.schemas.user import (
    RegisterSchema,
    LoginSchema,
    RefreshTokenSchema,
    ProfileUpdateSchema,
    ChangePasswordSchema,
    ProfileOutSchema,
    AuthResultSchema,
)
from utils.decorators import jwt_required
from .errors import respond_success

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
profile_update_schema = ProfileUpdateSchema()
change_password_schema = ChangePasswordSchema()
profile_out_schema = ProfileOutSchema()
auth_result_schema = AuthResultSchema()


def _auth_flow():
    return current_app.extensions["auth_flow"]


@bp.post("/register")
def register():
    """
    Register a new user and start a session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
            full_name: { type: string }
            birthday: { type: string, format: date }
            phone: { type: string }
            gender: { type: string }
    responses:
      201:
        description: Created (returns user and tokens)
      409:
        description: Email already exists
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = register_schema.load(payload)
    email = data.pop("email")
    password = data.pop("password")

    result = _auth_flow().register(email, password, **data)
    return respond_success(auth_result_schema.dump(result), 201)


@bp.post("/login")
def login():
    """
    Login: return user info, access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Email or password is incorrect
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)

    result = _auth_flow().login(data["email"], data["password"])
    return respond_success(auth_result_schema.dump(result))


@bp.post("/refresh")
@jwt_required(verify_exp=False)
def refresh():
    """
    Exchange a refresh token for new access and refresh tokens (rotation).
    The presented refresh token is invalidated.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refresh_token]
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns new tokens and permissions)
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_token_schema.load(payload)

    result = _auth_flow().refresh(g.current_user_id, data["refresh_token"])
    return respond_success(auth_result_schema.dump(result))


@bp.post("/logout")
@jwt_required(verify_exp=False)
def logout():
    """
    Logout: revokes the given refresh token. Revoking an unknown token succeeds.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refresh_token]
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_token_schema.load(payload)

    _auth_flow().logout(g.current_user_id, data["refresh_token"])
    return respond_success()


@bp.get("/profile")
@jwt_required()
def get_profile():
    """
    Get the current user's profile.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = _auth_flow().get_profile(g.current_user_id)
    return respond_success({"profile": profile_out_schema.dump(user)})


@bp.patch("/profile")
@jwt_required()
def update_profile():
    """
    Update profile fields (full_name, birthday, phone, gender).
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             full_name: { type: string }
             birthday: { type: string, format: date }
             phone: { type: string }
             gender: { type: string }
    responses:
      200:
        description: OK (returns updated profile)
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = profile_update_schema.load(payload)

    user = _auth_flow().update_profile(g.current_user_id, data)
    return respond_success({"profile": profile_out_schema.dump(user)})


@bp.patch("/password")
@jwt_required()
def change_password():
    """
    Change the current user's password. Existing sessions are revoked.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [old_password, new_password]
           properties:
             old_password: { type: string }
             new_password: { type: string }
    responses:
      200:
        description: OK
      400:
        description: Old password is not correct
    """
    payload = request.get_json(silent=True) or {}
    data = change_password_schema.load(payload)

    _auth_flow().change_password(g.current_user_id, data["old_password"], data["new_password"])
    return respond_success()

from __future__ import annotations

from flask import Blueprint, request, current_app

from models.schemas.user import (
    UserCreateSchema,
    UserUpdateSchema,
    UserPasswordSchema,
    UserListQuerySchema,
    UserOutSchema,
)
from utils.decorators import jwt_required
from .errors import respond_success

MAX_LIMIT = 100

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_password_schema = UserPasswordSchema()
user_list_query_schema = UserListQuerySchema()
user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


def _user_admin():
    return current_app.extensions["user_admin"]


@bp.get("/users")
@jwt_required()
def list_users():
    """
    List users (paginated, newest first)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: query
        name: page
        type: integer
      - in: query
        name: limit
        type: integer
    responses:
      200: { description: OK }
      422: { description: Validation error }
    """
    query = user_list_query_schema.load(request.args.to_dict())
    page = query["page"]
    limit = min(query["limit"], MAX_LIMIT)

    rows, total = _user_admin().list_users(page, limit)
    return respond_success(
        {
            "users": user_list_out_schema.dump(rows),
            "meta": {"page": page, "limit": limit, "total": total},
        }
    )


@bp.post("/users")
@jwt_required()
def create_user():
    """
    Create a user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password, full_name]
          properties:
            email: { type: string }
            password: { type: string }
            full_name: { type: string }
            birthday: { type: string, format: date }
            phone: { type: string }
            gender: { type: string }
    responses:
      201: { description: Created }
      409: { description: Email already exists }
      422: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)
    email = data.pop("email")
    password = data.pop("password")

    user = _user_admin().create_user(email, password, **data)
    return respond_success({"user": user_out_schema.dump(user)}, 201)


@bp.get("/users/<user_id>")
@jwt_required()
def get_user(user_id: str):
    """
    Get one user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    user = _user_admin().get_user(user_id)
    return respond_success({"user": user_out_schema.dump(user)})


@bp.patch("/users/<user_id>")
@jwt_required()
def update_user(user_id: str):
    """
    Update a user's email and profile fields
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          required: [email, full_name]
          properties:
            email: { type: string }
            full_name: { type: string }
            birthday: { type: string, format: date }
            phone: { type: string }
            gender: { type: string }
    responses:
      200: { description: OK }
      404: { description: User not found }
      409: { description: Email already exists }
      422: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)

    user = _user_admin().update_user(user_id, data)
    return respond_success({"user": user_out_schema.dump(user)})


@bp.patch("/users/<user_id>/password")
@jwt_required()
def update_password(user_id: str):
    """
    Reset a user's password; the user's sessions are revoked
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          required: [password]
          properties:
            password: { type: string }
    responses:
      200: { description: OK }
      404: { description: User not found }
      422: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = user_password_schema.load(payload)

    _user_admin().set_password(user_id, data["password"])
    return respond_success()


@bp.delete("/users/<user_id>")
@jwt_required()
def delete_user(user_id: str):
    """
    Delete a user and all of their sessions
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    _user_admin().delete_user(user_id)
    return respond_success()

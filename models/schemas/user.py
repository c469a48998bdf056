from marshmallow import Schema, fields, pre_load, validate, validates, ValidationError

MIN_PASSWORD_LENGTH = 8


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class _EmailNormalizingSchema(Schema):
    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_norm_email(data["email"]))
        return data


class ProfileFieldsSchema(Schema):
    full_name = fields.String(allow_none=True)
    birthday = fields.Date(allow_none=True)
    phone = fields.String(allow_none=True, validate=validate.Length(min=10, max=11))
    gender = fields.String(allow_none=True)


class RegisterSchema(ProfileFieldsSchema, _EmailNormalizingSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters long.")


class LoginSchema(_EmailNormalizingSchema):
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class ProfileUpdateSchema(ProfileFieldsSchema):
    pass


class ChangePasswordSchema(Schema):
    old_password = fields.String(required=True, load_only=True)
    new_password = fields.String(required=True, load_only=True)

    @validates("new_password")
    def validate_new_password(self, value, **kwargs):
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters long.")


class UserCreateSchema(ProfileFieldsSchema, _EmailNormalizingSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    full_name = fields.String(required=True, validate=validate.Length(min=1))

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters long.")


class UserUpdateSchema(ProfileFieldsSchema, _EmailNormalizingSchema):
    email = fields.Email(required=True)
    full_name = fields.String(required=True, validate=validate.Length(min=1))


class UserPasswordSchema(Schema):
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=6, max=20))


class UserListQuerySchema(Schema):
    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=20, validate=validate.Range(min=1))


class ProfileOutSchema(Schema):
    id = fields.String(allow_none=False)
    email = fields.String(allow_none=False)
    full_name = fields.String(allow_none=True)
    birthday = fields.Date(allow_none=True)
    phone = fields.String(allow_none=True)
    gender = fields.String(allow_none=True)


class UserOutSchema(ProfileOutSchema):
    permissions = fields.List(fields.String())
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class AuthResultSchema(Schema):
    user = fields.Nested(ProfileOutSchema)
    access_token = fields.String()
    refresh_token = fields.String()
    token_type = fields.String()
    expires_in = fields.Integer()
    permissions = fields.List(fields.String())

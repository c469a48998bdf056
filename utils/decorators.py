from __future__ import annotations
from functools import wraps
from flask import request, g, current_app
from services.exceptions import Unauthorized, TokenError


def jwt_required(verify_exp: bool = True):
    """
    Require a Bearer access token and set g.current_user_id from its subject.

    verify_exp=False still checks signature, issuer and type but accepts an
    expired token; the refresh endpoint uses it so a client whose access token
    has lapsed can still present its refresh token.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                raise Unauthorized("Missing or invalid Authorization header")
            token = auth.split(" ", 1)[1].strip()
            signer = current_app.extensions["token_signer"]
            try:
                decoded = signer.decode_access_token(token, verify_exp=verify_exp)
            except TokenError as e:
                raise Unauthorized(str(e))

            g.current_user_id = decoded.get("sub")
            return fn(*args, **kwargs)

        return wrapper

    return decorator

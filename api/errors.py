from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
import logging

from services.exceptions import AuthError, ErrorCode
from .messages import translate

logger = logging.getLogger(__name__)

# HTTP status -> (error code, message key) for werkzeug errors
_HTTP_ERRORS = {
    401: (ErrorCode.UNAUTHORIZED, "auth.unauthorized"),
    404: (ErrorCode.NOT_FOUND, "common.notFound"),
    422: (ErrorCode.INVALID_PARAMETER, "common.invalidParameter"),
}


def respond_success(data=None, status: int = 200):
    payload = {"success": True}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def error_response(code: ErrorCode, message: str, status: int, errors=None, data=None):
    payload = {"success": False, "code": int(code), "message": message}
    if errors:
        payload["errors"] = errors
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def register_error_handlers(app):
    # Service errors the client can act on
    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        return error_response(err.code, translate(err.message_key), err.status)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response(
            ErrorCode.INVALID_PARAMETER,
            translate("common.invalidParameter"),
            422,
            errors=err.messages,
        )

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 400
        if status in _HTTP_ERRORS:
            code, key = _HTTP_ERRORS[status]
            return error_response(code, translate(key), status)
        return error_response(ErrorCode.INVALID_PARAMETER, err.description or translate("common.badRequest"), status)

    # 500 Internal Error (catch-all): logged, never leaks internals outside debug
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        data = None
        if current_app and current_app.debug:
            data = {"type": err.__class__.__name__, "message": str(err)}
        return error_response(ErrorCode.SYSTEM_ERROR, translate("common.systemError"), 500, data=data)

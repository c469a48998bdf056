"""
Localized client messages.

The locale is negotiated from the Accept-Language header against
SUPPORTED_LOCALES; unknown keys fall back to the default locale and
then to the key itself.
"""
from flask import current_app, has_request_context, request

MESSAGES = {
    "en": {
        "common.systemError": "An unexpected error occurred",
        "common.invalidParameter": "Invalid input",
        "common.notFound": "Resource not found",
        "common.badRequest": "Bad request",
        "auth.emailExist": "Email already exists",
        "auth.wrongEmailOrPassword": "Email or password is incorrect",
        "auth.unauthorized": "Unauthorized",
        "auth.oldPasswordIsNotCorrect": "Old password is not correct",
        "user.notFound": "User not found",
    },
    "vi": {
        "common.systemError": "Đã xảy ra lỗi không mong muốn",
        "common.invalidParameter": "Dữ liệu không hợp lệ",
        "common.notFound": "Không tìm thấy tài nguyên",
        "common.badRequest": "Yêu cầu không hợp lệ",
        "auth.emailExist": "Email đã tồn tại",
        "auth.wrongEmailOrPassword": "Email hoặc mật khẩu không đúng",
        "auth.unauthorized": "Không có quyền truy cập",
        "auth.oldPasswordIsNotCorrect": "Mật khẩu cũ không đúng",
        "user.notFound": "Không tìm thấy người dùng",
    },
}


def current_locale() -> str:
    default = current_app.config.get("DEFAULT_LOCALE", "en")
    if not has_request_context():
        return default
    supported = current_app.config.get("SUPPORTED_LOCALES", ["en"])
    return request.accept_languages.best_match(supported) or default


def translate(key: str, locale: str | None = None) -> str:
    locale = locale or current_locale()
    catalog = MESSAGES.get(locale, {})
    if key in catalog:
        return catalog[key]
    fallback = MESSAGES.get(current_app.config.get("DEFAULT_LOCALE", "en"), {})
    return fallback.get(key, key)

"""Development server: `python -m api` or the `user-auth-api` script."""
import os

from . import create_app


def main():
    app = create_app(os.getenv("APP_ENV"))
    app.run(
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", "8000")),
        debug=app.config["DEBUG"],
    )


if __name__ == "__main__":
    main()

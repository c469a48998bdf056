"""Tests for the flask CLI commands registered by the app factory."""

from datetime import timedelta

from models.base_model import utcnow
from models.refresh_token import RefreshToken

from conftest import PASSWORD


def test_init_db(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "Database initialized" in result.output


def test_purge_tokens_removes_only_expired(app):
    flow = app.extensions["auth_flow"]
    storage = app.extensions["storage"]
    with app.app_context():
        stale = flow.register("a@x.com", PASSWORD)
        flow.register("b@x.com", PASSWORD)
        record = flow.token_store.find_active(stale.user, stale.refresh_token)
        record.expires_at = utcnow() - timedelta(days=1)
        storage.new(record)
        storage.save()

    result = app.test_cli_runner().invoke(args=["purge-tokens"])

    assert result.exit_code == 0
    assert "Removed 1 expired refresh token(s)" in result.output
    with app.app_context():
        assert storage.count(RefreshToken) == 1


def test_purge_tokens_with_nothing_expired(app):
    result = app.test_cli_runner().invoke(args=["purge-tokens"])
    assert result.exit_code == 0
    assert "Removed 0 expired refresh token(s)" in result.output

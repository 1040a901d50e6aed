"""Tests for the typer CLI."""

import pytest
from typer.testing import CliRunner

from src.cli import app
from src.cli import db_commands, user_commands
from src.pricehub.core.services import DbManageService, DbSessionService

runner = CliRunner()


@pytest.fixture(autouse=True)
def use_test_database(monkeypatch, db_service: DbSessionService):
    monkeypatch.setattr(
        db_commands, "get_db_manage_service", lambda: DbManageService(db_service)
    )
    monkeypatch.setattr(user_commands, "get_db_service", lambda: db_service)


class TestDbCommands:
    def test_init(self):
        result = runner.invoke(app, ["db", "init"])
        assert result.exit_code == 0
        assert "Database tables created" in result.output

    def test_seed_prints_credentials(self):
        result = runner.invoke(app, ["db", "seed"])
        assert result.exit_code == 0
        assert "admin@system.com" in result.output
        assert "supplier@example.com" in result.output

    def test_clear_requires_confirmation(self):
        runner.invoke(app, ["db", "seed"])
        result = runner.invoke(app, ["db", "clear"], input="n\n")
        assert "Aborted" in result.output

        listing = runner.invoke(app, ["users", "list"])
        assert "Found 3 users" in listing.output

    def test_clear_with_force(self):
        runner.invoke(app, ["db", "seed"])
        result = runner.invoke(app, ["db", "clear", "--force"])
        assert result.exit_code == 0

        listing = runner.invoke(app, ["users", "list"])
        assert "Found 1 users" in listing.output
        assert "super_admin / active" in listing.output


class TestUserCommands:
    def test_list_empty(self):
        result = runner.invoke(app, ["users", "list"])
        assert result.exit_code == 0
        assert "No users found" in result.output

    def test_create_super_admin(self):
        result = runner.invoke(
            app, ["users", "create-super-admin", "ops@example.com", "--password", "s3cure-pass"]
        )
        assert result.exit_code == 0
        assert "Created super admin" in result.output

        listing = runner.invoke(app, ["users", "list"])
        assert "Found 1 users" in listing.output
        assert "super_admin / active" in listing.output

    def test_create_super_admin_twice(self):
        args = ["users", "create-super-admin", "ops@example.com", "--password", "s3cure-pass"]
        runner.invoke(app, args)
        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_create_super_admin_weak_password(self):
        result = runner.invoke(
            app, ["users", "create-super-admin", "ops@example.com", "--password", "short"]
        )
        assert result.exit_code == 1
        assert "at least 8 characters" in result.output

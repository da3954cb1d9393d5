"""
CLI command tests (Flask CliRunner).
"""

from sweetshop.models import User, Role
from tests.conftest import make_sweet


class TestUsersCommands:
    def test_create_admin(self, app, db_session):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["users", "create", "--username", "root_admin",
                                     "--password", "secret1", "--role", "admin"])
        assert result.exit_code == 0, result.output
        assert "PASS Created user: root_admin" in result.output
        user = db_session.query(User).filter_by(username="root_admin").one()
        assert user.role is Role.ADMIN

    def test_create_rejects_duplicate(self, app, db_session, regular_user):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["users", "create", "--username", "regular_user", "--password", "secret1"])
        assert result.exit_code != 0
        assert "Username already taken" in result.output

    def test_list(self, app, regular_user, admin_user):
        result = app.test_cli_runner().invoke(args=["users", "list"])
        assert "regular_user" in result.output
        assert "admin_user" in result.output


class TestSweetsCommands:
    def test_list_out_of_stock(self, app, db_session):
        make_sweet(db_session, "Gone", quantity=0)
        make_sweet(db_session, "Plenty", quantity=9)
        result = app.test_cli_runner().invoke(args=["sweets", "list", "--out-of-stock"])
        assert "Gone" in result.output
        assert "Plenty" not in result.output

"""test suite for the command line interface."""
import json
import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from typer.testing import CliRunner

from maroon import __version__
from maroon.api.client import CredentialIssuer
from maroon.cli.context import AppContext
from maroon.cli.main import app
from maroon.credentials.token import StaticTokenProvider
from maroon.domain.errors import InvalidOrExpiredTokenError
from maroon.domain.models import Credentials

runner = CliRunner()

FRESH = Credentials(
    access_key_id="ASIAFRESH",
    secret_access_key="fresh-secret",
    session_token="fresh-token",
    expiration=datetime.now(timezone.utc) + timedelta(hours=1),
)


@pytest.fixture
def issuer():
    issuer = MagicMock(spec=CredentialIssuer)
    issuer.assume_role.return_value = FRESH
    issuer.get_console_url.return_value = "https://signin.example.test/console"
    return issuer


@pytest.fixture
def ctx(tmp_path, issuer):
    return AppContext(
        config_file=tmp_path / "maroon" / "config.json",
        aws_credentials_file=tmp_path / ".aws" / "credentials",
        aws_config_file=tmp_path / ".aws" / "config",
        issuer=issuer,
        token_provider=StaticTokenProvider("id-token"),
    )


@pytest.fixture(autouse=True)
def patched_context(ctx):
    with patch("maroon.cli.profile_commands.build_context", return_value=ctx), \
         patch("maroon.cli.credentials_commands.build_context", return_value=ctx), \
         patch("maroon.cli.main.build_context", return_value=ctx):
        yield


def add_dev_profile():
    return runner.invoke(app, [
        "profile", "add", "-p", "dev", "-i", "123456789012", "-r", "Admin", "--region", "us-east-1",
    ])


class TestRoot:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestProfileCommands:
    def test_add(self, ctx):
        result = add_dev_profile()

        assert result.exit_code == 0, result.output
        assert "Added profile 'dev'" in result.output
        assert ctx.store.get("dev").region == "us-east-1"
        assert "[profile dev]" in ctx.aws_config.path.read_text()

    def test_add_duplicate(self):
        add_dev_profile()
        result = add_dev_profile()

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_add_invalid_account(self):
        result = runner.invoke(app, [
            "profile", "add", "-p", "dev", "-i", "42", "-r", "Admin", "--region", "us-east-1",
        ])
        assert result.exit_code == 1
        assert "Account ID" in result.output

    def test_remove_unknown_is_noop(self, ctx):
        result = runner.invoke(app, ["profile", "remove", "-p", "ghost"])
        assert result.exit_code == 0
        assert not ctx.store.config_file.exists()

    def test_remove(self, ctx):
        add_dev_profile()
        result = runner.invoke(app, ["profile", "remove", "-p", "dev"])
        assert result.exit_code == 0
        assert ctx.store.list() == {}

    def test_list(self):
        add_dev_profile()
        result = runner.invoke(app, ["profile", "list"])
        assert result.exit_code == 0
        assert "dev" in result.output
        assert "123456789012" in result.output

    def test_list_empty(self):
        result = runner.invoke(app, ["profile", "list"])
        assert result.exit_code == 0
        assert "No profiles found" in result.output


class TestCredentialsCommands:
    def test_print(self, ctx, issuer):
        add_dev_profile()
        result = runner.invoke(app, ["credentials", "print", "-p", "dev"])

        assert result.exit_code == 0, result.output
        output = json.loads(result.stdout)
        assert output["Version"] == 1
        assert output["AccessKeyId"] == "ASIAFRESH"
        assert output["SessionToken"] == "fresh-token"
        assert datetime.fromisoformat(output["Expiration"]) == FRESH.expiration
        issuer.assume_role.assert_called_once()
        assert ctx.store.get("dev").credentials == FRESH

    def test_print_uses_cache(self, issuer):
        add_dev_profile()
        runner.invoke(app, ["credentials", "print", "-p", "dev"])
        runner.invoke(app, ["credentials", "print", "-p", "dev"])
        issuer.assume_role.assert_called_once()

    def test_print_unknown_profile(self):
        result = runner.invoke(app, ["credentials", "print", "-p", "ghost"])
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_print_invalid_name(self):
        result = runner.invoke(app, ["credentials", "print", "-p", "bad_name"])
        assert result.exit_code == 1
        assert "not allowed" in result.output

    def test_print_expired_token(self, issuer):
        add_dev_profile()
        issuer.assume_role.side_effect = InvalidOrExpiredTokenError()

        result = runner.invoke(app, ["credentials", "print", "-p", "dev"])

        assert result.exit_code == 1
        assert "Invalid/expired token" in result.output

    def test_update(self, ctx):
        add_dev_profile()
        result = runner.invoke(app, ["credentials", "update", "-p", "dev"])

        assert result.exit_code == 0, result.output
        text = ctx.credentials_file.path.read_text()
        assert "[default]" in text
        assert "aws_access_key_id = ASIAFRESH" in text
        assert "aws_session_token = fresh-token" in text


class TestConsoleUrl:
    def test_success(self, issuer):
        result = runner.invoke(app, ["get-console-url", "-i", "123456789012", "-a", "ReadOnly", "-d", "900"])

        assert result.exit_code == 0, result.output
        assert "https://signin.example.test/console" in result.stdout
        issuer.get_console_url.assert_called_once_with("123456789012", "ReadOnly", 900, "id-token")

    def test_invalid_access_type(self, issuer):
        result = runner.invoke(app, ["get-console-url", "-i", "123456789012", "-a", "Root", "-d", "900"])
        assert result.exit_code == 1
        issuer.get_console_url.assert_not_called()

    @pytest.mark.parametrize("duration", ["899", "43201"])
    def test_invalid_duration(self, issuer, duration):
        result = runner.invoke(app, ["get-console-url", "-i", "123456789012", "-a", "ReadOnly", "-d", duration])
        assert result.exit_code == 1
        issuer.get_console_url.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

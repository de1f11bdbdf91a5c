# ABOUTME: Tests for the sign-in command and its exit status
# ABOUTME: Runs the cleo application against a controlled environment

import logging
from unittest.mock import patch

import pytest
from cleo.io.inputs.argv_input import ArgvInput
from cleo.io.outputs.buffered_output import BufferedOutput
from cleo.testers.command_tester import CommandTester

from gitpod_aws_signin.cli import create_application
from gitpod_aws_signin.cli.utils.log import PACKAGE_LOGGER, configure_logging

GITPOD_VARIABLES = [
    "GITPOD_WORKSPACE_URL",
    "IDP_AWS_ROLE_ARN",
    "SUPERVISOR_ADDR",
    "GITPOD_HOST",
    "GITPOD_WORKSPACE_ID",
    "GITPOD_AWS_SIGNIN_DEBUG",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in GITPOD_VARIABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)


@pytest.fixture
def tester():
    application = create_application()
    return CommandTester(application.find("signin"))


def run_application(*args):
    """Run the whole application as the console script would, returning its exit code."""
    application = create_application()
    application.auto_exits(False)
    application.catch_exceptions(False)
    return application.run(ArgvInput(["gitpod-aws-signin", *args]), BufferedOutput(), BufferedOutput())


def package_debug_records(caplog):
    return [r for r in caplog.records if r.name.startswith(PACKAGE_LOGGER) and r.levelno == logging.DEBUG]


def test_exits_non_zero_when_no_method_applies(clean_env, tester, capsys):
    assert tester.execute() == 1
    assert "I've tried everything" in capsys.readouterr().err


def test_exits_zero_when_gp_login_succeeds(clean_env, monkeypatch, tester):
    monkeypatch.setenv("GITPOD_WORKSPACE_URL", "https://ws-abc123.gitpod.io")
    monkeypatch.setenv("IDP_AWS_ROLE_ARN", "arn:aws:iam::123456789012:role/gitpod-workspace")

    with patch("gitpod_aws_signin.config.shutil.which", return_value="/usr/bin/gp"), patch(
        "gitpod_aws_signin.clients.GitpodCli.login_aws"
    ) as login:
        assert tester.execute() == 0

    login.assert_called_once_with()


def test_missing_role_falls_through_to_failure(clean_env, monkeypatch, tester, capsys):
    monkeypatch.setenv("GITPOD_WORKSPACE_URL", "https://ws-abc123.gitpod.io")

    with patch("gitpod_aws_signin.config.shutil.which", return_value="/usr/bin/gp"):
        assert tester.execute() == 1

    err = capsys.readouterr().err
    assert err.count("IDP_AWS_ROLE_ARN environment variable is not set") == 2
    assert "I've tried everything" in err


class TestApplication:
    def test_runs_signin_without_naming_it(self, clean_env, capsys):
        assert run_application() == 1
        assert "I've tried everything" in capsys.readouterr().err

    def test_signs_in_end_to_end(self, clean_env, monkeypatch):
        monkeypatch.setenv("GITPOD_WORKSPACE_URL", "https://ws-abc123.gitpod.io")
        monkeypatch.setenv("IDP_AWS_ROLE_ARN", "arn:aws:iam::123456789012:role/gitpod-workspace")

        with patch("gitpod_aws_signin.config.shutil.which", return_value="/usr/bin/gp"), patch(
            "gitpod_aws_signin.clients.GitpodCli.login_aws"
        ) as login:
            assert run_application() == 0

        login.assert_called_once_with()

    def test_single_command_mode(self):
        application = create_application()

        assert application.is_single_command()
        assert application.find("signin").name == "signin"
        assert application.name == "gitpod-aws-signin"


class TestLogging:
    def test_warning_level_by_default(self, clean_env, caplog):
        assert run_application() == 1

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING
        assert package_debug_records(caplog) == []

    def test_verbose_flag_enables_debug(self, clean_env, caplog):
        assert run_application("-v") == 1

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG
        messages = [r.getMessage() for r in package_debug_records(caplog)]
        assert "Trying sign-in method 'gitpod'" in messages

    def test_debug_env_var_enables_debug(self, clean_env, monkeypatch, caplog):
        monkeypatch.setenv("GITPOD_AWS_SIGNIN_DEBUG", "1")

        assert run_application() == 1

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG
        messages = [r.getMessage() for r in package_debug_records(caplog)]
        assert "Trying sign-in method 'sso'" in messages

    def test_configure_logging_writes_to_stderr(self, capsys):
        root = logging.getLogger()
        saved = root.handlers[:]
        saved_level = root.level
        root.handlers.clear()
        try:
            configure_logging(True)
            logging.getLogger(f"{PACKAGE_LOGGER}.dispatcher").debug("debug line for stderr")
        finally:
            root.handlers[:] = saved
            root.setLevel(saved_level)

        assert "debug line for stderr" in capsys.readouterr().err

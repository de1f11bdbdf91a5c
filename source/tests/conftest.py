# ABOUTME: Shared fixtures and fakes for the Gitpod AWS sign-in tests
# ABOUTME: Fakes record every call so tests can assert on ordering and short-circuiting

import io
import json

import pytest
import requests
from rich.console import Console

from gitpod_aws_signin.config import SigninConfig
from gitpod_aws_signin.exceptions import TokenRequestError
from gitpod_aws_signin.models import FederatedCredentials

ROLE_ARN = "arn:aws:iam::123456789012:role/gitpod-workspace"


def make_response(status_code=200, body=None, content=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if content is None:
        content = json.dumps(body if body is not None else {}).encode("utf-8")
    response._content = content
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def console_output():
    return io.StringIO()


@pytest.fixture
def console(console_output):
    return Console(file=console_output, force_terminal=False, width=200)


@pytest.fixture
def gitpod_config():
    return SigninConfig(
        workspace_url="https://ws-abc123.gitpod.io",
        role_arn=ROLE_ARN,
        supervisor_addr="localhost:22999",
        gitpod_host="https://gitpod.io",
        workspace_id="ws-abc123",
        gp_path="/usr/bin/gp",
    )


class FakeSupervisor:
    def __init__(self, token="gitpod-token", error=None):
        self.token = token
        self.error = error
        self.calls = []

    def get_gitpod_token(self, gitpod_host_name):
        self.calls.append(gitpod_host_name)
        if self.error:
            raise self.error
        return self.token


class FakeIdentityProvider:
    def __init__(self, token="id-token"):
        self.token = token
        self.calls = []

    def get_id_token(self, bearer_token, workspace_id, audience):
        self.calls.append((bearer_token, workspace_id, audience))
        return self.token


class FakeAwsCli:
    def __init__(self, credentials=None):
        self.credentials = credentials or FederatedCredentials(
            access_key_id="ASIAEXAMPLE",
            secret_access_key="secret",
            session_token="session",
        )
        self.assume_calls = []
        self.configure_calls = []

    def assume_role_with_web_identity(self, role_arn, session_name, web_identity_token):
        self.assume_calls.append((role_arn, session_name, web_identity_token))
        return self.credentials

    def configure_set(self, profile, key, value):
        self.configure_calls.append((profile, key, value))


@pytest.fixture
def fake_supervisor():
    return FakeSupervisor()


@pytest.fixture
def failing_supervisor():
    return FakeSupervisor(error=TokenRequestError("cannot get gitpod token: 503"))


@pytest.fixture
def fake_identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def fake_aws():
    return FakeAwsCli()

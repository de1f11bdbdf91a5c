# ABOUTME: Clients for the external calls made while signing in to AWS from Gitpod
# ABOUTME: Wraps the gp and aws CLIs plus the supervisor and identity provider HTTP APIs

"""Typed clients for the Gitpod and AWS endpoints used by the sign-in methods."""

import json
import logging
import subprocess

import requests

from gitpod_aws_signin.config import HTTP_TIMEOUT_SECONDS
from gitpod_aws_signin.exceptions import CommandError, TokenRequestError
from gitpod_aws_signin.models import FederatedCredentials

logger = logging.getLogger(__name__)

SUPERVISOR_TOKEN_PATH = "/_supervisor/v1/token/gitpod/{host}/"
ID_TOKEN_PATH = "/gitpod.experimental.v1.IdentityProviderService/GetIDToken"


def run_command(args: list[str]) -> str:
    """Run a command and return its combined stdout and stderr.

    Raises CommandError carrying the output when the command cannot be started
    or exits non-zero. Only the subcommand is named in the message, never the
    arguments, since those may carry tokens and keys.
    """
    name = " ".join(args[:3])
    logger.debug(f"Running: {name}")
    try:
        result = subprocess.run(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        output = e.output or ""
        raise CommandError(
            f"{name} failed with exit status {e.returncode}: {output}",
            command=args[:3],
            output=output,
            returncode=e.returncode,
        ) from e
    except OSError as e:
        raise CommandError(f"cannot run {args[0]}: {e}", command=args[:3]) from e

    return result.stdout or ""


def _decode_token(response: requests.Response, url: str, what: str) -> str:
    try:
        response.raise_for_status()
        body = response.json()
    except (requests.RequestException, ValueError) as e:
        raise TokenRequestError(f"cannot decode {what}: {e}", url=url) from e

    token = body.get("token") if isinstance(body, dict) else None
    if not token:
        raise TokenRequestError(f"cannot decode {what}: response has no token", url=url)
    return token


class GitpodCli:
    """The `gp` command-line helper available inside Gitpod workspaces."""

    def __init__(self, executable: str = "gp"):
        self.executable = executable

    def login_aws(self) -> None:
        """Let gp perform the OIDC login and write the AWS profile itself."""
        args = [self.executable, "idp", "login", "aws"]
        try:
            run_command(args)
        except CommandError as e:
            cause = e.__cause__ or e
            raise CommandError(
                f"gp idp login failure: {e.output}: {cause}",
                command=args,
                output=e.output,
                returncode=e.returncode,
            ) from cause


class HttpClient:
    """Base for clients that talk HTTP; closes the session only if it created it."""

    def __init__(self, session: requests.Session = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SupervisorClient(HttpClient):
    """Local workspace supervisor that hands out Gitpod API tokens."""

    def __init__(self, supervisor_addr: str, session: requests.Session = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        super().__init__(session, timeout)
        self.supervisor_addr = supervisor_addr

    def token_url(self, gitpod_host_name: str) -> str:
        return f"http://{self.supervisor_addr}" + SUPERVISOR_TOKEN_PATH.format(host=gitpod_host_name)

    def get_gitpod_token(self, gitpod_host_name: str) -> str:
        """Fetch a bearer token for the Gitpod API of the given installation."""
        url = self.token_url(gitpod_host_name)
        logger.debug(f"Requesting Gitpod token from supervisor at {self.supervisor_addr}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TokenRequestError(f"cannot get gitpod token: {e}", url=url) from e
        return _decode_token(response, url, "gitpod token")


class IdentityProviderClient(HttpClient):
    """Gitpod identity provider API issuing OIDC identity tokens."""

    def __init__(self, gitpod_host_name: str, session: requests.Session = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        super().__init__(session, timeout)
        self.gitpod_host_name = gitpod_host_name

    @property
    def id_token_url(self) -> str:
        return f"https://api.{self.gitpod_host_name}{ID_TOKEN_PATH}"

    def get_id_token(self, bearer_token: str, workspace_id: str, audience: list[str]) -> str:
        """Exchange a Gitpod API token for an identity token addressed to `audience`."""
        url = self.id_token_url
        headers = {
            "Authorization": f"Bearer {bearer_token}",
            "Content-Type": "application/json",
        }
        payload = {"workspace_id": workspace_id, "audience": list(audience)}

        logger.debug(f"Requesting ID token for workspace {workspace_id} with audience {audience}")
        try:
            response = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise TokenRequestError(f"cannot make ID token request: {e}", url=url) from e
        return _decode_token(response, url, "ID token response")


class AwsCli:
    """The AWS CLI, used for web identity federation and profile writes."""

    def __init__(self, executable: str = "aws"):
        self.executable = executable

    def assume_role_with_web_identity(
        self, role_arn: str, session_name: str, web_identity_token: str
    ) -> FederatedCredentials:
        """Exchange an identity token for temporary credentials of `role_arn`."""
        args = [
            self.executable,
            "sts",
            "assume-role-with-web-identity",
            "--role-arn",
            role_arn,
            "--role-session-name",
            session_name,
            "--web-identity-token",
            web_identity_token,
            "--output",
            "json",
        ]
        logger.debug(f"Assuming role {role_arn} as session {session_name}")
        output = run_command(args)

        try:
            return FederatedCredentials.from_sts_response(json.loads(output))
        except ValueError as e:
            raise CommandError(
                f"cannot parse assume-role-with-web-identity output: {e}",
                command=args[:3],
                output=output,
            ) from e

    def configure_set(self, profile: str, key: str, value: str) -> None:
        """Write a single key into an AWS CLI profile."""
        logger.debug(f"Setting {key} on profile {profile}")
        run_command([self.executable, "configure", "set", "--profile", profile, key, value])

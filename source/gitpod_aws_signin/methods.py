# ABOUTME: Sign-in methods tried in priority order to obtain AWS credentials
# ABOUTME: Gitpod CLI login, a manual Gitpod OIDC federation flow and an SSO placeholder

"""Sign-in methods.

Every method implements ``sign_in() -> bool``:

- ``True``: the workspace is now signed in to AWS.
- ``False``: the method does not apply here and was not attempted.
- raises ``SigninError``: the method was attempted and failed.
"""

import logging
import time
from collections.abc import Callable
from contextlib import ExitStack

import jwt
from rich.console import Console

from gitpod_aws_signin.clients import AwsCli, GitpodCli, IdentityProviderClient, SupervisorClient
from gitpod_aws_signin.config import SigninConfig
from gitpod_aws_signin.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

MISSING_ROLE_MESSAGE = (
    "Running in a Gitpod workspace, but the IDP_AWS_ROLE_ARN environment variable is not set.\n"
    "Please setup OIDC trust (https://www.gitpod.io/docs/integrations/aws) "
    "and set the IDP_AWS_ROLE_ARN environment variable on your project\n"
)


class SigninMethod:
    """A single way of signing in to AWS."""

    name = "base"

    def sign_in(self) -> bool:
        raise NotImplementedError


class GitpodSigninMethod(SigninMethod):
    """Shared preconditions for methods that rely on a Gitpod workspace."""

    def __init__(self, config: SigninConfig, console: Console | None = None):
        self.config = config
        self.console = console or Console(stderr=True)

    def should_attempt(self) -> bool:
        if not self.config.running_in_gitpod:
            logger.debug(f"{self.name}: not running in Gitpod or gp CLI not found, skipping")
            return False

        if not self.config.role_arn:
            self.console.print(MISSING_ROLE_MESSAGE, markup=False, highlight=False, soft_wrap=True)
            return False

        return True


class GitpodSignin(GitpodSigninMethod):
    """Sign in by delegating the whole OIDC flow to `gp idp login aws`."""

    name = "gitpod"

    def __init__(self, config: SigninConfig, console: Console | None = None, gp: GitpodCli | None = None):
        super().__init__(config, console)
        self.gp = gp or GitpodCli(config.gp_path or "gp")

    def sign_in(self) -> bool:
        if not self.should_attempt():
            return False

        self.gp.login_aws()
        logger.info("Signed in to AWS with gp idp login")
        return True


class GitpodVerboseSignin(GitpodSigninMethod):
    """Sign in by talking to the Gitpod APIs directly instead of through the gp CLI.

    Considerably more brittle than GitpodSignin: the identity provider API is
    experimental and may change without notice.
    """

    name = "gitpod-verbose"

    def __init__(
        self,
        config: SigninConfig,
        console: Console | None = None,
        supervisor: SupervisorClient | None = None,
        identity_provider: IdentityProviderClient | None = None,
        aws: AwsCli | None = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(config, console)
        self.supervisor = supervisor
        self.identity_provider = identity_provider
        self.aws = aws or AwsCli()
        self.clock = clock

    def _require(self, value: str | None, variable: str) -> str:
        if not value:
            raise ConfigurationError(f"{variable} environment variable is not set", variable=variable)
        return value

    def sign_in(self) -> bool:
        if not self.should_attempt():
            return False

        config = self.config
        supervisor_addr = self._require(config.supervisor_addr, "SUPERVISOR_ADDR")
        workspace_id = self._require(config.workspace_id, "GITPOD_WORKSPACE_ID")
        host = config.gitpod_host_name()

        # Clients created here are closed once both tokens are fetched
        with ExitStack() as stack:
            # 1. Get token to talk to Gitpod
            supervisor = self.supervisor or stack.enter_context(
                SupervisorClient(supervisor_addr, timeout=config.http_timeout)
            )
            gitpod_token = supervisor.get_gitpod_token(host)

            # 2. Produce identity token
            identity_provider = self.identity_provider or stack.enter_context(
                IdentityProviderClient(host, timeout=config.http_timeout)
            )
            id_token = identity_provider.get_id_token(gitpod_token, workspace_id, [config.audience])
        self._log_claims(id_token)

        # 3. Exchange ID token for AWS credentials
        session_name = f"{workspace_id}-{int(self.clock())}"
        credentials = self.aws.assume_role_with_web_identity(config.role_arn, session_name, id_token)

        # 4. Persist credentials as AWS profile
        for key, value in credentials.to_profile_values().items():
            self.aws.configure_set(config.aws_profile, key, value)

        logger.info(f"Wrote temporary credentials to AWS profile '{config.aws_profile}'")
        return True

    def _log_claims(self, id_token: str) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        try:
            claims = jwt.decode(id_token, options={"verify_signature": False})
        except jwt.PyJWTError as e:
            logger.debug(f"Could not decode ID token claims: {e}")
            return

        for claim in ("iss", "sub", "aud", "exp"):
            if claim in claims:
                logger.debug(f"ID token {claim}: {claims[claim]}")


class SsoSignin(SigninMethod):
    """Placeholder for AWS SSO sign-in."""

    name = "sso"

    def sign_in(self) -> bool:
        return False


def default_signin_methods(config: SigninConfig, console: Console | None = None) -> list[SigninMethod]:
    """Sign-in methods in the order they are tried."""
    return [
        GitpodSignin(config, console),
        GitpodVerboseSignin(config, console),
        SsoSignin(),
    ]

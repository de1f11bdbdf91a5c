# ABOUTME: Configuration for Gitpod AWS sign-in, read once from the process environment
# ABOUTME: Gates which sign-in methods apply and carries the endpoints they talk to

"""Configuration management for Gitpod AWS sign-in."""

import os
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from urllib.parse import urlparse

from gitpod_aws_signin.exceptions import ConfigurationError

DEFAULT_AWS_PROFILE = "default"
STS_AUDIENCE = "sts.amazonaws.com"
HTTP_TIMEOUT_SECONDS = 10
DEBUG_ENV_VAR = "GITPOD_AWS_SIGNIN_DEBUG"


@dataclass(frozen=True)
class SigninConfig:
    """Environment signal shared by every sign-in method."""

    workspace_url: str | None = None
    role_arn: str | None = None
    supervisor_addr: str | None = None
    gitpod_host: str | None = None
    workspace_id: str | None = None
    gp_path: str | None = None  # Resolved path of the gp CLI, None when not on PATH
    debug: bool = False
    aws_profile: str = DEFAULT_AWS_PROFILE
    audience: str = STS_AUDIENCE
    http_timeout: float = HTTP_TIMEOUT_SECONDS

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        which: Callable[[str], str | None] | None = None,
    ) -> "SigninConfig":
        """Create configuration from environment variables."""
        env = os.environ if environ is None else environ
        which = which or shutil.which

        def get(name: str) -> str | None:
            # Empty values count as unset
            return env.get(name) or None

        return cls(
            workspace_url=get("GITPOD_WORKSPACE_URL"),
            role_arn=get("IDP_AWS_ROLE_ARN"),
            supervisor_addr=get("SUPERVISOR_ADDR"),
            gitpod_host=get("GITPOD_HOST"),
            workspace_id=get("GITPOD_WORKSPACE_ID"),
            gp_path=which("gp"),
            debug=env.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes"),
        )

    @property
    def running_in_gitpod(self) -> bool:
        """True when inside a Gitpod workspace with the gp CLI available."""
        return bool(self.workspace_url) and bool(self.gp_path)

    def gitpod_host_name(self) -> str:
        """Return host[:port] of the Gitpod installation."""
        if not self.gitpod_host:
            raise ConfigurationError("GITPOD_HOST environment variable is not set", variable="GITPOD_HOST")

        # Handle both full URLs and host-only inputs
        raw = self.gitpod_host
        url_to_parse = raw if "://" in raw else f"https://{raw}"

        try:
            # Userinfo never belongs in the endpoints built from this host
            netloc = urlparse(url_to_parse).netloc.rpartition("@")[2]
        except ValueError as e:
            raise ConfigurationError(f"invalid Gitpod host url: {e}", variable="GITPOD_HOST") from e

        if not netloc:
            raise ConfigurationError(f"invalid Gitpod host url: {raw!r}", variable="GITPOD_HOST")
        return netloc

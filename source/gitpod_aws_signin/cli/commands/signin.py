# ABOUTME: Sign-in command that runs every sign-in method until one succeeds
# ABOUTME: Exits 0 once signed in and 1 when no method could sign in

"""Signin command - Sign the workspace in to AWS."""

from cleo.commands.command import Command
from rich.console import Console

from gitpod_aws_signin.cli.utils.log import configure_logging
from gitpod_aws_signin.config import SigninConfig
from gitpod_aws_signin.dispatcher import sign_in
from gitpod_aws_signin.methods import default_signin_methods


class SigninCommand(Command):
    name = "signin"
    description = "Sign in to AWS using the first sign-in method that applies"

    def handle(self) -> int:
        """Execute the signin command."""
        config = SigninConfig.from_env()
        configure_logging(config.debug or self.io.is_verbose())

        console = Console(stderr=True)
        methods = default_signin_methods(config, console)

        return 0 if sign_in(methods, console) else 1

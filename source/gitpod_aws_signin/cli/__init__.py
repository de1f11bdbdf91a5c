# ABOUTME: CLI module for Gitpod AWS sign-in
# ABOUTME: Provides a single-command cleo application

"""Command-line interface for Gitpod AWS sign-in."""

from cleo.application import Application

from gitpod_aws_signin import __version__

from .commands.signin import SigninCommand


class SigninApplication(Application):
    """Application whose only command runs without being named on the command line."""

    def __init__(self) -> None:
        super().__init__("gitpod-aws-signin", __version__)

        command = SigninCommand()
        self.add(command)

        # Single-command mode: no command argument is parsed, `signin` always runs
        self._default_command = command.name
        self._single_command = True


def create_application() -> Application:
    """Create the CLI application."""
    return SigninApplication()


def main():
    """Main entry point for the CLI."""
    application = create_application()
    application.run()


if __name__ == "__main__":
    main()

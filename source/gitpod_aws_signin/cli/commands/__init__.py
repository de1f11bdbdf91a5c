# ABOUTME: Commands module for Gitpod AWS sign-in CLI
# ABOUTME: Contains the sign-in command implementation

"""CLI commands for Gitpod AWS sign-in."""

from .signin import SigninCommand

__all__ = ["SigninCommand"]

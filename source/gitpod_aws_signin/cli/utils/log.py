# ABOUTME: Logging setup for the Gitpod AWS sign-in CLI
# ABOUTME: Routes log records to stderr so stdout stays free for tooling

"""Logging configuration."""

import logging
import sys

PACKAGE_LOGGER = "gitpod_aws_signin"


def configure_logging(debug: bool) -> None:
    """Send log records to stderr; DEBUG when requested, otherwise WARNING."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)

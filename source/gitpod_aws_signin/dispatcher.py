# ABOUTME: Dispatcher that tries each sign-in method once, in priority order
# ABOUTME: Stops at the first success and reports attempt errors without aborting

"""Sign-in dispatcher."""

import logging
from collections.abc import Iterable

from rich.console import Console

from gitpod_aws_signin.exceptions import SigninError
from gitpod_aws_signin.methods import SigninMethod

logger = logging.getLogger(__name__)

EXHAUSTED_MESSAGE = "don't know how to sign in - I've tried everything 🤷"


def sign_in(methods: Iterable[SigninMethod], console: Console | None = None) -> bool:
    """Try `methods` in order and return True as soon as one signs in."""
    console = console or Console(stderr=True)

    for method in methods:
        logger.debug(f"Trying sign-in method '{method.name}'")
        try:
            if method.sign_in():
                logger.debug(f"Signed in with '{method.name}'")
                return True
        except SigninError as e:
            console.print(f"error while logging in: {e}", style="red", markup=False, highlight=False, soft_wrap=True)
            continue

        logger.debug(f"Sign-in method '{method.name}' did not apply")

    console.print(EXHAUSTED_MESSAGE, markup=False, highlight=False, soft_wrap=True)
    return False

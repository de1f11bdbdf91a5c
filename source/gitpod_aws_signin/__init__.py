# ABOUTME: Gitpod AWS sign-in - federate a Gitpod workspace identity into AWS credentials
# ABOUTME: Main package exposing the sign-in methods and the dispatcher that tries them in order

"""Sign a Gitpod workspace in to AWS."""

__version__ = "1.0.0"
__all__ = ["cli", "config", "clients", "methods", "dispatcher"]

# ABOUTME: Data model for temporary AWS credentials obtained through web identity federation
# ABOUTME: Parses STS responses and maps them onto AWS credential-file profile keys

"""Federated credential model."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FederatedCredentials:
    """Temporary credentials returned by AssumeRoleWithWebIdentity."""

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)
    expiration: str | None = None

    @classmethod
    def from_sts_response(cls, payload: dict[str, Any]) -> "FederatedCredentials":
        """Create credentials from the JSON output of `aws sts assume-role-with-web-identity`."""
        creds = payload.get("Credentials") if isinstance(payload, dict) else None
        if not isinstance(creds, dict):
            raise ValueError("response has no Credentials object")

        required = ["AccessKeyId", "SecretAccessKey", "SessionToken"]
        missing = [k for k in required if not creds.get(k)]
        if missing:
            raise ValueError(f"response is missing credential fields: {', '.join(missing)}")

        return cls(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expiration=creds.get("Expiration"),
        )

    def to_profile_values(self) -> dict[str, str]:
        """Map credentials to the keys `aws configure set` writes into a profile."""
        return {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
            "aws_session_token": self.session_token,
        }

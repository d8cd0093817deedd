"""Credential records for git's credential helpers."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr

logger = logging.getLogger(__name__)

OWNER_READ_WRITE = stat.S_IRUSR | stat.S_IWUSR


class CredentialRecord(BaseModel):
    """One protocol/host/username/password entry for `git credential approve`."""

    model_config = ConfigDict(frozen=True)

    protocol: str = Field(default="https")
    host: str
    username: str
    password: SecretStr

    def to_git_input(self) -> str:
        """Render the record in git's `key=value` credential format.

        The trailing blank line terminates the record for git.
        """

        lines = [
            f"protocol={self.protocol}",
            f"host={self.host}",
            f"username={self.username}",
            f"password={self.password.get_secret_value()}",
        ]
        return "\n".join(lines) + "\n\n"


def redact_token(token: str) -> str:
    """Show only the first and last three characters of a token.

    Tokens too short to redact that way are hidden completely.
    """

    if len(token) <= 6:
        return "***"
    return f"{token[:3]}...{token[-3:]}"


def restrict_to_owner(path: Path) -> bool:
    """chmod `path` to owner read/write only. Returns False if it does not exist."""

    if not path.is_file():
        logger.debug("Credential file not found; nothing to restrict", extra={"path": str(path)})
        return False

    path.chmod(OWNER_READ_WRITE)
    logger.info("Credential file permissions restricted", extra={"path": str(path)})
    return True

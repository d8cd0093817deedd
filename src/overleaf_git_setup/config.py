"""Configuration for the Overleaf Git setup tool.

Configuration is loaded from:
- environment variables (prefixed with `OVERLEAF_`)
- and a local `.env` file (if present)

Every value has a default matching the project this tool was first written
for, so running it without any configuration clones that project. CLI flags
override whatever was loaded here.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROJECT_ID = "683581efaba44761da964c7d"
DEFAULT_CLONE_DIR = "Team_Achievements"
DEFAULT_CREDENTIAL_USERNAME = "git"
DEFAULT_CREDENTIAL_HOST = "git.overleaf.com"


def _default_credentials_file() -> Path:
    return Path.home() / ".git-credentials"


class SetupSettings(BaseSettings):
    """Settings for a single setup run.

    Environment variables:
    - OVERLEAF_PROJECT_ID
    - OVERLEAF_CLONE_DIR
    - OVERLEAF_CREDENTIAL_USERNAME
    - OVERLEAF_CREDENTIAL_HOST
    - OVERLEAF_CREDENTIALS_FILE  (optional)
    - OVERLEAF_USE_SUDO          (optional)
    - OVERLEAF_LOG_LEVEL         (optional)

    Notes:
        Tests can point at a different env file via
        `SetupSettings(_env_file=path_to_env)`.
    """

    project_id: str = Field(
        default=DEFAULT_PROJECT_ID,
        description="Overleaf project identifier (last path segment of the Git URL)",
    )
    clone_dir: str = Field(
        default=DEFAULT_CLONE_DIR,
        description="Directory (relative to the working directory) to clone into",
    )
    credential_username: str = Field(
        default=DEFAULT_CREDENTIAL_USERNAME,
        description="Username embedded in the clone URL and the stored credential",
    )
    credential_host: str = Field(
        default=DEFAULT_CREDENTIAL_HOST,
        description="Git-over-HTTPS host serving the project",
    )
    credential_protocol: str = Field(
        default="https",
        description="Protocol recorded with the stored credential",
    )
    credentials_file: Path = Field(
        default_factory=_default_credentials_file,
        description="Plain-text file written by git's 'store' credential helper",
    )

    use_sudo: bool = Field(
        default=True,
        description="Run package manager commands through sudo",
    )
    git_packages: list[str] = Field(
        default_factory=lambda: ["git"],
        description="Packages installed when git is missing",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root logging level (logs go to stderr as JSON)",
    )

    model_config = SettingsConfigDict(
        env_prefix="OVERLEAF_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    @field_validator("project_id", "clone_dir", "credential_username", "credential_host")
    @classmethod
    def _require_non_empty(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be empty")
        return stripped

    @field_validator("credentials_file")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        # git runs the helper from whatever directory it is invoked in.
        return value.expanduser().absolute()

    @property
    def clone_url(self) -> str:
        """HTTPS clone URL with the credential username embedded."""

        return f"https://{self.credential_username}@{self.credential_host}/{self.project_id}"

    @property
    def clone_path(self) -> Path:
        """Clone target, relative to the current working directory."""

        return Path(self.clone_dir)

    @property
    def credential_helper(self) -> str:
        """Value for `credential.helper`; names the file only when it is not git's default."""

        if self.credentials_file == _default_credentials_file():
            return "store"
        return f"store --file {shlex.quote(str(self.credentials_file))}"

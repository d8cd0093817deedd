"""Thin wrapper around the `git` executable.

All git invocations go through `GitClient._run` so logging and error handling
are centralized. Secrets are only ever passed on stdin, never on argv.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from overleaf_git_setup.errors import CloneFailedError, CommandFailedError
from overleaf_git_setup.git.credentials import CredentialRecord

logger = logging.getLogger(__name__)

# git exits with 1 from `git config --get` when the key is not set.
_CONFIG_KEY_MISSING = 1


def check_result(
    completed: subprocess.CompletedProcess[str],
    *,
    action: str,
    error_cls: type[CommandFailedError] = CommandFailedError,
) -> None:
    """Raise `error_cls` if the completed process exited non-zero."""

    if completed.returncode == 0:
        return

    argv = completed.args if isinstance(completed.args, str) else " ".join(completed.args)
    message = f"{action} failed (exit status {completed.returncode}): {argv}"
    stderr = (completed.stderr or "").strip()
    if stderr:
        message = f"{message}\n{stderr}"
    logger.debug(
        "Command failed", extra={"action": action, "returncode": completed.returncode}
    )
    raise error_cls(message, returncode=completed.returncode)


class GitClient:
    """Run the git operations needed to set up an authenticated clone."""

    def __init__(self, *, executable: str = "git") -> None:
        self._executable = executable

    def is_installed(self) -> bool:
        """Return True if the git executable can be found on PATH."""

        return shutil.which(self._executable) is not None

    def _run(
        self,
        args: Sequence[str],
        *,
        input_text: str | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        cmd = [self._executable, *args]
        logger.debug("Running git command", extra={"argv": cmd})
        try:
            return subprocess.run(
                cmd,
                check=False,
                text=True,
                capture_output=capture,
                input=input_text,
                env=dict(env) if env is not None else None,
            )
        except OSError as exc:
            raise CommandFailedError(f"failed to execute {self._executable}: {exc}") from exc

    def get_global_config(self, key: str) -> str:
        """Return a global config value, or an empty string if it is unset."""

        completed = self._run(["config", "--global", "--get", key])
        if completed.returncode == _CONFIG_KEY_MISSING:
            return ""
        check_result(completed, action=f"Reading git config {key}")
        return completed.stdout.strip()

    def set_global_config(self, key: str, value: str) -> None:
        completed = self._run(["config", "--global", key, value])
        check_result(completed, action=f"Setting git config {key}")
        logger.info("Global git config updated", extra={"key": key})

    def approve_credential(self, record: CredentialRecord) -> None:
        """Hand a credential to the configured helper via `git credential approve`."""

        completed = self._run(["credential", "approve"], input_text=record.to_git_input())
        check_result(completed, action="Storing credentials")
        logger.info(
            "Credential approved",
            extra={"host": record.host, "username": record.username},
        )

    def clone(self, url: str, destination: Path) -> None:
        """Clone `url` into `destination`, failing instead of prompting for a password."""

        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        # Output is not captured so clone progress stays visible to the operator.
        completed = self._run(["clone", url, str(destination)], env=env, capture=False)
        check_result(completed, action="Git clone", error_cls=CloneFailedError)
        logger.info("Clone finished", extra={"url": url, "destination": str(destination)})

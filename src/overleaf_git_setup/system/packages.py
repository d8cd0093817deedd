"""OS package manager integration (apt)."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from overleaf_git_setup.errors import CommandFailedError
from overleaf_git_setup.git.client import check_result

logger = logging.getLogger(__name__)


class PackageInstaller:
    """Refresh the package list and install packages, optionally via sudo.

    Command output is left attached to the terminal so sudo can ask for a
    password and apt progress stays visible.
    """

    def __init__(self, *, use_sudo: bool = True, manager: str = "apt") -> None:
        self._use_sudo = use_sudo
        self._manager = manager

    def _command(self, *args: str) -> list[str]:
        prefix = ["sudo"] if self._use_sudo else []
        return [*prefix, self._manager, *args]

    def _run(self, cmd: Sequence[str], *, action: str) -> None:
        logger.debug("Running package manager command", extra={"argv": list(cmd)})
        try:
            completed = subprocess.run(list(cmd), check=False, text=True)
        except OSError as exc:
            raise CommandFailedError(f"{action} failed: {exc}") from exc
        check_result(completed, action=action)

    def refresh(self) -> None:
        self._run(self._command("update"), action="Updating package list")

    def install(self, packages: Sequence[str]) -> None:
        if not packages:
            raise ValueError("at least one package is required")
        self._run(
            self._command("install", "-y", *packages),
            action=f"Installing {', '.join(packages)}",
        )
        logger.info("Packages installed", extra={"packages": list(packages)})

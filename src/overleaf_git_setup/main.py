"""CLI entrypoint for the Overleaf Git setup tool."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from overleaf_git_setup import __version__
from overleaf_git_setup.config import SetupSettings
from overleaf_git_setup.errors import CloneFailedError, SetupError
from overleaf_git_setup.git.client import GitClient
from overleaf_git_setup.logging import configure_logging
from overleaf_git_setup.prompts import Prompter
from overleaf_git_setup.system.packages import PackageInstaller
from overleaf_git_setup.workflow.orchestrator import SetupOrchestrator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="overleaf-git-setup",
        description=(
            "Install git if needed, configure your git identity, store an Overleaf "
            "token with git's credential helper and clone an Overleaf project."
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"overleaf-git-setup {__version__}"
    )
    parser.add_argument(
        "--project-id",
        default=None,
        help="Overleaf project ID to clone (env: OVERLEAF_PROJECT_ID)",
    )
    parser.add_argument(
        "--clone-dir",
        default=None,
        help="Directory to clone into (env: OVERLEAF_CLONE_DIR)",
    )
    parser.add_argument(
        "--host",
        dest="credential_host",
        default=None,
        help="Overleaf git host (env: OVERLEAF_CREDENTIAL_HOST)",
    )
    parser.add_argument(
        "--username",
        dest="credential_username",
        default=None,
        help="Username for the clone URL and stored credential (env: OVERLEAF_CREDENTIAL_USERNAME)",
    )
    parser.add_argument(
        "--credentials-file",
        type=Path,
        default=None,
        help="File written by git's 'store' helper (default: ~/.git-credentials)",
    )
    parser.add_argument(
        "--no-sudo",
        dest="use_sudo",
        action="store_false",
        default=None,
        help="Run package manager commands without sudo",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level for JSON logs on stderr (env: OVERLEAF_LOG_LEVEL)",
    )
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    keys = (
        "project_id",
        "clone_dir",
        "credential_host",
        "credential_username",
        "credentials_file",
        "use_sudo",
        "log_level",
    )
    return {key: getattr(args, key) for key in keys if getattr(args, key) is not None}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = SetupSettings(**_cli_overrides(args))
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env and flags):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    orchestrator = SetupOrchestrator(
        settings=settings,
        git=GitClient(),
        installer=PackageInstaller(use_sudo=settings.use_sudo),
        prompter=Prompter(),
    )

    try:
        result = orchestrator.run()
    except KeyboardInterrupt:
        print()
        logger.warning("Interrupted", extra={"state": orchestrator.snapshot.state.value})
        return 130
    except SetupError as e:
        logger.error(
            "Setup failed",
            extra={"state": orchestrator.snapshot.state.value, "error": type(e).__name__},
        )
        # A failed clone has already printed its troubleshooting checklist.
        if not isinstance(e, CloneFailedError):
            print(f"Error: {e} Exiting.")
        return 1
    except Exception:
        logger.exception("Setup failed unexpectedly")
        return 1

    logger.info(
        "Setup finished",
        extra={"outcome": result.outcome.value, "snapshot": result.snapshot.to_json()},
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

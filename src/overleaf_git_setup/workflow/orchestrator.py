"""The setup workflow.

`SetupOrchestrator.run` drives six steps in order: ensure git is installed,
configure the global identity, collect the Overleaf token, configure the
`store` credential helper, seed (and lock down) the stored credential, and
clone the project. Every step either completes or raises a `SetupError`;
there are no retries.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from overleaf_git_setup.config import SetupSettings
from overleaf_git_setup.errors import (
    CloneFailedError,
    CommandFailedError,
    MissingInputError,
    PrerequisiteDeclinedError,
)
from overleaf_git_setup.git.client import GitClient
from overleaf_git_setup.git.credentials import CredentialRecord, redact_token, restrict_to_owner
from overleaf_git_setup.prompts import Prompter
from overleaf_git_setup.system.packages import PackageInstaller
from overleaf_git_setup.workflow.state_machine import SetupSnapshot, SetupState, transition

logger = logging.getLogger(__name__)


class SetupOutcome(str, Enum):
    CLONED = "cloned"
    ABORTED_EXISTING_DIR = "aborted_existing_dir"


@dataclass(frozen=True, slots=True)
class SetupResult:
    outcome: SetupOutcome
    snapshot: SetupSnapshot
    clone_url: str
    clone_path: Path


@dataclass(frozen=True, slots=True)
class _IdentityField:
    key: str
    label: str
    example: str


_IDENTITY_FIELDS = (
    _IdentityField(key="user.name", label="name", example="Your Name"),
    _IdentityField(key="user.email", label="email", example="your.email@example.com"),
)


class SetupOrchestrator:
    """Run the one-time Overleaf clone setup against a set of collaborators."""

    def __init__(
        self,
        *,
        settings: SetupSettings,
        git: GitClient,
        installer: PackageInstaller,
        prompter: Prompter,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._settings = settings
        self._git = git
        self._installer = installer
        self._prompter = prompter
        self._out = output_fn
        self._snapshot = SetupSnapshot()

    @property
    def snapshot(self) -> SetupSnapshot:
        return self._snapshot

    def _advance(self, to: SetupState) -> None:
        self._snapshot = transition(current=self._snapshot, to=to)
        logger.debug("Setup state changed", extra={"state": to.value})

    def run(self) -> SetupResult:
        self._out("Starting Overleaf Git Setup Script...")
        try:
            self._advance(SetupState.GIT_CHECK)
            self.ensure_git()

            self._advance(SetupState.IDENTITY_CONFIG)
            self.configure_identity()

            self._advance(SetupState.TOKEN_INPUT)
            token = self.collect_token()

            self._advance(SetupState.CREDENTIAL_HELPER_CONFIG)
            self.configure_credential_helper()

            self._advance(SetupState.CREDENTIAL_SEED)
            self.seed_credential(token)

            self._advance(SetupState.PERMISSION_HARDEN)
            self.harden_credentials_file()

            self._advance(SetupState.CLONE_DECISION)
            outcome = self.clone(token)
        except CloneFailedError:
            self._advance(SetupState.CLONE_FAILED)
            raise
        except Exception:
            if not self._snapshot.is_terminal:
                self._advance(SetupState.FAILED)
            raise

        if outcome is SetupOutcome.CLONED:
            self._advance(SetupState.CLONE_SUCCEEDED)
        else:
            self._advance(SetupState.ABORTED_EXISTING_DIR)

        return SetupResult(
            outcome=outcome,
            snapshot=self._snapshot,
            clone_url=self._settings.clone_url,
            clone_path=self._settings.clone_path,
        )

    def ensure_git(self) -> None:
        if self._git.is_installed():
            self._out("\nGit is already installed.")
            return

        self._out("\nGit is not installed.")
        if not self._prompter.confirm("Do you want to install Git?"):
            raise PrerequisiteDeclinedError(
                "Git installation skipped. The script cannot proceed without Git."
            )

        self._out("Updating package list (requires sudo)...")
        self._installer.refresh()
        self._out("Installing Git (requires sudo)...")
        self._installer.install(self._settings.git_packages)
        self._out("Git installed successfully.")

    def configure_identity(self) -> None:
        self._out("\n--- Configuring Global Git User Details ---")
        self._out("These details will be used for your commits.")

        current = {f.key: self._git.get_global_config(f.key) for f in _IDENTITY_FIELDS}
        for field in _IDENTITY_FIELDS:
            value = current[field.key]
            if value and not self._prompter.confirm(
                f"Current Git user {field.label} is '{value}'. Update it?"
            ):
                logger.debug("Keeping existing identity value", extra={"key": field.key})
                continue

            new_value = self._prompter.ask(
                f"Enter your Git user {field.label} (e.g., {field.example})"
            )
            self._git.set_global_config(field.key, new_value)

        self._out("Git global user details configured.")

    def collect_token(self) -> str:
        self._out("\n--- Overleaf Authentication Setup ---")
        self._out("To clone the private Overleaf project, you need an authentication token.")
        self._out("This token will be stored locally using Git's credential helper.")

        token = self._prompter.ask_secret("Enter your Overleaf authentication token")
        if not token:
            raise MissingInputError("No Overleaf authentication token provided.")
        return token

    def configure_credential_helper(self) -> None:
        self._out("\nConfiguring Git credential helper to 'store' credentials...")
        self._out(
            f"This will save your token for {self._settings.credential_host} in plain text "
            f"in {self._settings.credentials_file}."
        )
        self._git.set_global_config("credential.helper", self._settings.credential_helper)
        self._out("Git credential helper configured.")

    def seed_credential(self, token: str) -> None:
        settings = self._settings
        self._out(
            f"\nStoring Overleaf credentials for user '{settings.credential_username}' "
            f"on host '{settings.credential_host}'..."
        )
        record = CredentialRecord(
            protocol=settings.credential_protocol,
            host=settings.credential_host,
            username=settings.credential_username,
            password=token,
        )
        self._git.approve_credential(record)
        self._out("Overleaf credentials should now be stored.")

    def harden_credentials_file(self) -> None:
        path = self._settings.credentials_file
        try:
            restricted = restrict_to_owner(path)
        except OSError as exc:
            raise CommandFailedError(f"Restricting permissions on {path} failed: {exc}") from exc
        if restricted:
            self._out(f"Permissions for {path} set to 600 (read/write for user only).")

    def clone(self, token: str) -> SetupOutcome:
        settings = self._settings
        url = settings.clone_url
        target = settings.clone_path

        self._out("\nAttempting to clone Overleaf project...")
        self._out(f"URL: {url}")
        self._out(f"Target directory: {target}")

        if target.is_dir():
            if not self._prompter.confirm(
                f"Directory '{target}' already exists. Do you want to remove it and re-clone?"
            ):
                self._out(
                    f"Clone aborted as directory '{target}' already exists and was not removed."
                )
                self._out(
                    "Setup partially complete. Git is installed and credentials might be stored."
                )
                return SetupOutcome.ABORTED_EXISTING_DIR

            self._out(f"Removing existing directory: {target}...")
            try:
                if target.is_symlink():
                    # rmtree refuses symlinks; drop the link, keep what it points at.
                    target.unlink()
                else:
                    shutil.rmtree(target)
            except OSError as exc:
                raise CommandFailedError(f"Removing {target} failed: {exc}") from exc

        try:
            self._git.clone(url, target)
        except CloneFailedError:
            self._print_clone_checklist(token)
            raise

        self._out(f"\nSuccessfully cloned Overleaf project into '{target}' directory.")
        self._out(f"You can now navigate to the project directory using: cd {target}")
        self._out("\n--- Setup Complete! ---")
        return SetupOutcome.CLONED

    def _print_clone_checklist(self, token: str) -> None:
        settings = self._settings
        self._out("Error: Git clone failed.")
        self._out("Please check the following:")
        self._out(
            f"1. Your Overleaf authentication token ('{redact_token(token)}') is correct "
            "and has not expired."
        )
        self._out(f"2. The Overleaf Project ID ('{settings.project_id}') is correct.")
        self._out(f"3. You have network access to {settings.credential_host}.")
        self._out(
            f"4. If the directory '{settings.clone_path}' was re-created, "
            "ensure it was removed properly."
        )
        self._out(
            f"5. Review the contents of {settings.credentials_file} "
            "(use with caution as it contains your token)."
        )

"""Test configuration and fixtures."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import pytest

from overleaf_git_setup.config import SetupSettings
from overleaf_git_setup.prompts import Prompter


class ScriptedInput:
    """Callable standing in for `input`/`getpass`, answering from a list."""

    def __init__(self, answers: Iterable[str]) -> None:
        self._answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._answers:
            raise EOFError
        return self._answers.pop(0)

    @property
    def remaining(self) -> list[str]:
        return list(self._answers)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test in an empty working directory without OVERLEAF_* overrides."""
    for key in list(os.environ):
        if key.startswith("OVERLEAF_"):
            monkeypatch.delenv(key)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def credentials_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temporary directory and return git's default credential file in it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home / ".git-credentials"


@pytest.fixture
def settings(credentials_file: Path) -> SetupSettings:
    """Provide default settings; the credential file resolves inside the temporary HOME."""
    return SetupSettings()


@pytest.fixture
def make_prompter() -> Callable[..., tuple[Prompter, ScriptedInput, ScriptedInput, list[str]]]:
    """Build a Prompter driven by scripted answers.

    Returns the prompter, the plain and secret input scripts, and the list
    collecting everything the prompter printed.
    """

    def _make(
        answers: Iterable[str] = (), secrets: Iterable[str] = ()
    ) -> tuple[Prompter, ScriptedInput, ScriptedInput, list[str]]:
        plain = ScriptedInput(answers)
        secret = ScriptedInput(secrets)
        printed: list[str] = []
        prompter = Prompter(input_fn=plain, secret_fn=secret, output_fn=printed.append)
        return prompter, plain, secret, printed

    return _make


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo handler changes made by configure_logging() inside a test."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)

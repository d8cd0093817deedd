"""Interactive prompts.

`Prompter` wraps the two input primitives (a plain line reader and a reader
with terminal echo disabled) so the workflow can be driven by scripted input
in tests.
"""

from __future__ import annotations

import getpass
import logging
from collections.abc import Callable

from overleaf_git_setup.errors import MissingInputError

logger = logging.getLogger(__name__)

AFFIRMATIVE = frozenset({"y", "yes"})
NEGATIVE = frozenset({"n", "no", ""})

INVALID_CONFIRMATION = "Invalid input. Please answer 'y' or 'n'."


def parse_confirmation(answer: str) -> bool | None:
    """Map a yes/no answer to True/False, or None when it is neither.

    Matching is case-insensitive and an empty answer means "no".
    """

    normalized = answer.strip().lower()
    if normalized in AFFIRMATIVE:
        return True
    if normalized in NEGATIVE:
        return False
    return None


class Prompter:
    """Reads answers from the operator."""

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] = input,
        secret_fn: Callable[[str], str] = getpass.getpass,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._input = input_fn
        self._secret = secret_fn
        self._output = output_fn

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question until a valid answer is given. Defaults to no."""

        while True:
            try:
                answer = self._input(f"{message} [y/N]: ")
            except EOFError:
                # Closed stdin behaves like pressing Enter.
                logger.debug("EOF on confirmation prompt; treating as 'no'")
                return False
            decision = parse_confirmation(answer)
            if decision is not None:
                return decision
            self._output(INVALID_CONFIRMATION)

    def ask(self, message: str) -> str:
        """Ask for a line of text, re-asking on empty answers."""

        while True:
            try:
                answer = self._input(f"{message}: ").strip()
            except EOFError as exc:
                raise MissingInputError(f"No answer given for: {message}") from exc
            if answer:
                return answer
            self._output("A value is required.")

    def ask_secret(self, message: str) -> str:
        """Ask for a value without echoing it to the terminal."""

        try:
            return self._secret(f"{message}: ").strip()
        except EOFError:
            return ""

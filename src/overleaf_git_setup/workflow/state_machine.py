from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SetupState(str, Enum):
    START = "start"
    GIT_CHECK = "git_check"
    IDENTITY_CONFIG = "identity_config"
    TOKEN_INPUT = "token_input"
    CREDENTIAL_HELPER_CONFIG = "credential_helper_config"
    CREDENTIAL_SEED = "credential_seed"
    PERMISSION_HARDEN = "permission_harden"
    CLONE_DECISION = "clone_decision"
    CLONE_SUCCEEDED = "clone_succeeded"
    CLONE_FAILED = "clone_failed"
    ABORTED_EXISTING_DIR = "aborted_existing_dir"
    FAILED = "failed"


TERMINAL_STATES: frozenset[SetupState] = frozenset(
    {
        SetupState.CLONE_SUCCEEDED,
        SetupState.CLONE_FAILED,
        SetupState.ABORTED_EXISTING_DIR,
        SetupState.FAILED,
    }
)

ALLOWED_TRANSITIONS: dict[SetupState, set[SetupState]] = {
    SetupState.START: {SetupState.GIT_CHECK},
    SetupState.GIT_CHECK: {SetupState.IDENTITY_CONFIG},
    SetupState.IDENTITY_CONFIG: {SetupState.TOKEN_INPUT},
    SetupState.TOKEN_INPUT: {SetupState.CREDENTIAL_HELPER_CONFIG},
    SetupState.CREDENTIAL_HELPER_CONFIG: {SetupState.CREDENTIAL_SEED},
    SetupState.CREDENTIAL_SEED: {SetupState.PERMISSION_HARDEN},
    SetupState.PERMISSION_HARDEN: {SetupState.CLONE_DECISION},
    SetupState.CLONE_DECISION: {
        SetupState.CLONE_SUCCEEDED,
        SetupState.CLONE_FAILED,
        SetupState.ABORTED_EXISTING_DIR,
    },
}

# Any step that has not finished may fail fatally.
for _state in ALLOWED_TRANSITIONS:
    ALLOWED_TRANSITIONS[_state].add(SetupState.FAILED)
del _state


class IllegalTransitionError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class SetupSnapshot:
    """Where the setup run is, plus every state it passed through."""

    state: SetupState = SetupState.START
    history: tuple[SetupState, ...] = field(default=(SetupState.START,))

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def to_json(self) -> dict[str, object]:
        return {"state": self.state.value, "history": [s.value for s in self.history]}


def transition(*, current: SetupSnapshot, to: SetupState) -> SetupSnapshot:
    allowed = ALLOWED_TRANSITIONS.get(current.state, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.state.value} -> {to.value}")
    return SetupSnapshot(state=to, history=(*current.history, to))

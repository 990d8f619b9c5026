"""Error types for lifecycle-fsm."""
from __future__ import annotations

from typing import NoReturn


class FsmError(Exception):
    """Raised when a transition is rejected (no edge, or vetoed by ``before_exit``)."""

    def __init__(self, from_state: str, to_state: str) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f'cannot change state from "{from_state}" to "{to_state}"'
        )


def raise_unresolved(value: object) -> NoReturn:
    """Raise the resolution error for a value that is not a registered State."""
    raise TypeError(f"an instance of State class is expected, got {value!r}")

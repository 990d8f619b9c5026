"""State node and lifecycle hooks."""
from __future__ import annotations

import inspect
import json
from enum import Enum
from typing import Any, Awaitable, Callable, TypedDict

from lifecycle_fsm.errors import raise_unresolved

EntryHook = Callable[["State", "State", Any], "Awaitable[None] | None"]
ExitHook = Callable[["State", "State", Any], bool]


class StateHooks(TypedDict, total=False):
    """Optional callbacks run around a transition.

    ``before_exit`` runs on the state being left and may veto the move by
    returning False. ``on_entry`` runs on the state being entered and may be
    a coroutine function.
    """

    on_entry: EntryHook
    before_exit: ExitHook


HOOK_NAMES = frozenset(StateHooks.__annotations__)


def state_name(name: object) -> str:
    """Normalize a state name. ``str``-valued Enum members map to their value."""
    if isinstance(name, Enum):
        name = name.value
    if not isinstance(name, str):
        raise_unresolved(name)
    return str(name)


class State:
    """A named node in a state machine graph.

    States compare and hash by identity. Names only matter while a builder
    resolves its configuration.
    """

    __slots__ = ("_name", "_hooks")

    def __init__(self, name: str, hooks: StateHooks | None = None) -> None:
        self._name = state_name(name)
        self._hooks: StateHooks = dict(hooks) if hooks else {}  # type: ignore[assignment]

    @property
    def name(self) -> str:
        return self._name

    @property
    def hooks(self) -> StateHooks:
        """Copy of the registered hooks."""
        return dict(self._hooks)  # type: ignore[return-value]

    async def entry(self, from_state: State, to_state: State, context: Any) -> None:
        """Run ``on_entry`` if registered, awaiting it when it returns an awaitable."""
        hook = self._hooks.get("on_entry")
        if callable(hook):
            result = hook(from_state, to_state, context)
            if inspect.isawaitable(result):
                await result

    def exit(self, from_state: State, to_state: State, context: Any) -> bool:
        """Return the ``before_exit`` verdict, or True when no hook is registered."""
        hook = self._hooks.get("before_exit")
        if callable(hook):
            return bool(hook(from_state, to_state, context))
        return True

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"State({self._name!r})"


class StateEncoder(json.JSONEncoder):
    """JSON encoder that writes State objects as their name."""

    def default(self, o: Any) -> Any:
        if isinstance(o, State):
            return str(o)
        return super().default(o)

"""StateMachine runtime: transition checks, hook protocol and action dispatch."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Sequence, Union

from lifecycle_fsm.errors import FsmError, raise_unresolved
from lifecycle_fsm.graph import ActionTable, TransitionGraph
from lifecycle_fsm.state import State, state_name

logger = logging.getLogger(__name__)

StateOrName = Union[State, str]


class StateMachine:
    """A built state machine.

    Holds the registered states, a read-only transition graph and action
    table, and the current/previous state. Only a successful transition
    changes the current state.

    Not safe for concurrent use: while an ``on_entry`` hook is suspended the
    current state is still the old one, so callers must keep at most one
    transition in flight per machine.
    """

    def __init__(
        self,
        current_state: State,
        states: Sequence[State],
        transitions: TransitionGraph | None = None,
        actions: ActionTable | None = None,
    ) -> None:
        self._states: tuple[State, ...] = tuple(states)
        self._by_name: dict[str, State] = {s.name: s for s in self._states}
        if not any(s is current_state for s in self._states):
            raise_unresolved(current_state)
        self._transitions = transitions if transitions is not None else TransitionGraph()
        self._actions = actions if actions is not None else ActionTable()
        self._curr_state: State = current_state
        self._prev_state: State | None = None

    # --- Properties ---

    @property
    def current_state(self) -> State:
        return self._curr_state

    @property
    def previous_state(self) -> State | None:
        """State left by the last successful transition, None before the first one."""
        return self._prev_state

    @property
    def states(self) -> tuple[State, ...]:
        return self._states

    # --- Queries ---

    def _resolve(self, target: StateOrName) -> State:
        if isinstance(target, State):
            return target
        if not isinstance(target, (str, Enum)):
            raise_unresolved(target)
        state = self._by_name.get(state_name(target))
        if state is None:
            raise_unresolved(target)
        return state

    def has_transition(self, target: StateOrName) -> bool:
        """Return True if the graph has an edge from the current state to ``target``.

        Raises TypeError if ``target`` is an unknown name or not a State.
        """
        return self._transitions.has(self._curr_state, self._resolve(target))

    def allowed_transition_states(self) -> list[State]:
        """States reachable in one step from the current state, in declaration order."""
        targets = self._transitions.targets(self._curr_state)
        return [s for s in self._states if s in targets]

    def allowed_transition_state_names(self) -> list[str]:
        return [str(s) for s in self.allowed_transition_states()]

    def can(self, action_name: str) -> bool:
        """Return True if ``action_name`` has a transition from the current state."""
        return self._actions.target(action_name, self._curr_state) is not None

    def available_actions(self) -> list[str]:
        """Action names that can be triggered from the current state."""
        return [name for name in self._actions.names() if self.can(name)]

    # --- Transitions ---

    async def try_change_state(self, target: StateOrName, context: Any = None) -> State:
        """Move to ``target``, running ``before_exit`` then ``on_entry``.

        Raises FsmError if there is no edge to ``target`` or the current
        state's ``before_exit`` vetoes the move. Exceptions raised by
        ``on_entry`` propagate unchanged. In every failure case the current
        and previous state are left untouched.
        """
        from_state = self._curr_state
        to_state = self._resolve(target)

        if (
            not self._transitions.has(from_state, to_state)
            or not from_state.exit(from_state, to_state, context)
        ):
            logger.debug("Rejected transition %s -> %s", from_state, to_state)
            raise FsmError(from_state.name, to_state.name)

        await to_state.entry(from_state, to_state, context)

        self._prev_state = from_state
        self._curr_state = to_state
        logger.debug("Changed state %s -> %s", from_state, to_state)
        return self._curr_state

    async def maybe_change_state(
        self, target: StateOrName, context: Any = None,
    ) -> State | None:
        """Like try_change_state, but return None instead of raising."""
        try:
            return await self.try_change_state(target, context)
        except Exception as exc:
            logger.debug("Transition to %r failed: %s", target, exc)
            return None

    async def trigger(self, action_name: str, context: Any = None) -> State:
        """Run the transition bound to ``action_name`` from the current state.

        Unknown actions, and actions with no pair for the current state,
        return the current state without running any hook.
        """
        to_state = self._actions.target(action_name, self._curr_state)
        if to_state is None:
            logger.debug(
                "Action '%s' ignored in state %s", action_name, self._curr_state,
            )
            return self._curr_state
        return await self.try_change_state(to_state, context)

    def __repr__(self) -> str:
        return f"StateMachine(current_state={self._curr_state!r})"

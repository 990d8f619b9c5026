"""StateMachineBuilder: collects states and transitions, resolves names on build."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from lifecycle_fsm.errors import raise_unresolved
from lifecycle_fsm.graph import ActionTable, TransitionGraph
from lifecycle_fsm.machine import StateMachine
from lifecycle_fsm.state import HOOK_NAMES, State, StateHooks, state_name

logger = logging.getLogger(__name__)

# (from_name, [to_name, ...]) or (from_name, {action_name: to_name, ...})
TransitionSpec = Iterable[
    tuple[str, Union[Iterable[str], Mapping[str, str]]]
]


@dataclass(frozen=True, slots=True)
class _Compiled:
    states: tuple[State, ...]
    by_name: dict[str, State]
    transitions: TransitionGraph
    actions: ActionTable


class StateMachineBuilder:
    """Accumulates named states, hooks and transitions, then builds machines.

    Names are resolved only in :meth:`build`. Machines built from an
    unchanged configuration share the same State objects, transition graph
    and action table; any ``with_*`` call starts a fresh compilation.
    """

    def __init__(self) -> None:
        self._states: dict[str, StateHooks] = {}
        self._transitions: list[tuple[str, list[str] | dict[str, str]]] = []
        self._compiled: _Compiled | None = None

    # --- Definition methods ---

    def with_state(self, name: str, hooks: StateHooks | None = None) -> StateMachineBuilder:
        """Register a state. Re-registering merges hooks, later keys win."""
        self._add_state(name, hooks)
        return self

    def with_states(
        self, names: Iterable[str], hooks: StateHooks | None = None,
    ) -> StateMachineBuilder:
        """Register several states sharing the same hooks."""
        for name in names:
            self._add_state(name, hooks)
        return self

    def with_transitions(self, spec: TransitionSpec) -> StateMachineBuilder:
        """Set the transition specification, replacing any previous one.

        Each entry is ``(from_name, targets)`` where ``targets`` is either a
        list of destination names or a dict of ``{action_name: to_name}``.
        The dict form also defines actions for :meth:`StateMachine.trigger`.
        """
        entries: list[tuple[str, list[str] | dict[str, str]]] = []
        for entry in spec:
            try:
                from_name, targets = entry
            except (TypeError, ValueError):
                raise ValueError(
                    f"Transition entry must be a (from, targets) pair, got {entry!r}"
                ) from None
            if isinstance(targets, Mapping):
                entries.append((
                    state_name(from_name),
                    {str(action): state_name(to) for action, to in targets.items()},
                ))
            elif isinstance(targets, (str, bytes)) or not isinstance(targets, Iterable):
                raise ValueError(
                    f"Targets of '{from_name}' must be a list of names or a dict "
                    f"of actions, got {targets!r}"
                )
            else:
                entries.append((state_name(from_name), [state_name(t) for t in targets]))
        self._transitions = entries
        self._compiled = None
        return self

    def _add_state(self, name: str, hooks: StateHooks | None) -> None:
        key = state_name(name)
        if hooks:
            unknown = set(hooks) - HOOK_NAMES
            if unknown:
                raise ValueError(
                    f"Unknown hook(s) for state '{key}': {sorted(unknown)}"
                )
        merged = dict(self._states.get(key, {}))
        merged.update(hooks or {})
        self._states[key] = merged  # type: ignore[assignment]
        self._compiled = None

    # --- Lookup methods ---

    def has_state(self, name: str) -> bool:
        """Check if a state name is registered."""
        return state_name(name) in self._states

    def state_names(self) -> list[str]:
        """List registered state names in registration order."""
        return list(self._states)

    # --- Build ---

    def build(self, initial_state_name: str) -> StateMachine:
        """Return a new StateMachine starting in ``initial_state_name``.

        Raises TypeError if the initial state, or any state named in the
        transition specification, is not registered.
        """
        compiled = self._compile(initial_state_name)
        initial = compiled.by_name[state_name(initial_state_name)]
        return StateMachine(
            initial, compiled.states, compiled.transitions, compiled.actions,
        )

    def _check_names(self, initial_state_name: str) -> None:
        registered = self._states
        for name in self._referenced_names(initial_state_name):
            if name not in registered:
                raise_unresolved(name)

    def _referenced_names(self, initial_state_name: str) -> Iterable[str]:
        yield state_name(initial_state_name)
        for from_name, targets in self._transitions:
            yield from_name
            yield from (targets.values() if isinstance(targets, dict) else targets)

    def _compile(self, initial_state_name: str) -> _Compiled:
        self._check_names(initial_state_name)
        if self._compiled is not None:
            return self._compiled

        states = tuple(State(name, hooks) for name, hooks in self._states.items())
        by_name = {s.name: s for s in states}

        edges: list[tuple[State, list[State]]] = []
        actions: dict[str, list[tuple[State, State]]] = {}
        for from_name, targets in self._transitions:
            from_state = by_name[from_name]
            if isinstance(targets, dict):
                edges.append((from_state, [by_name[t] for t in targets.values()]))
                for action_name, to_name in targets.items():
                    actions.setdefault(action_name, []).append(
                        (from_state, by_name[to_name])
                    )
            else:
                edges.append((from_state, [by_name[t] for t in targets]))

        self._compiled = _Compiled(
            states=states,
            by_name=by_name,
            transitions=TransitionGraph(edges),
            actions=ActionTable(actions.items()),
        )
        logger.debug(
            "Compiled %d states, %d sources, %d actions",
            len(states), len(self._compiled.transitions), len(self._compiled.actions),
        )
        return self._compiled

    # --- Plain-data form ---

    def definition(self) -> dict[str, Any]:
        """Return states and transitions as a JSON-serializable dict. Hooks are omitted."""
        return {
            "states": list(self._states),
            "transitions": [
                [from_name, dict(targets) if isinstance(targets, dict) else list(targets)]
                for from_name, targets in self._transitions
            ],
        }

    @classmethod
    def from_definition(cls, definition: Mapping[str, Any]) -> StateMachineBuilder:
        """Create a builder from a dict produced by :meth:`definition`.

        Raises ValueError on unknown keys or a missing ``states`` list.
        """
        unknown = set(definition) - {"states", "transitions"}
        if unknown:
            raise ValueError(f"Unknown definition key(s): {sorted(unknown)}")
        states = definition.get("states")
        if not isinstance(states, list):
            raise ValueError("Definition must contain a 'states' list")
        builder = cls().with_states(states)
        transitions = definition.get("transitions")
        if transitions is not None:
            builder.with_transitions(transitions)
        return builder

"""Read-only transition graph and action table keyed by State identity."""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from lifecycle_fsm.state import State


class TransitionGraph:
    """Maps each source State to the frozenset of States reachable in one step.

    A state with no entry has no outgoing transitions. Repeated edges for the
    same source are merged.
    """

    __slots__ = ("_edges",)

    def __init__(self, edges: Iterable[tuple[State, Iterable[State]]] = ()) -> None:
        merged: dict[State, set[State]] = {}
        for from_state, to_states in edges:
            merged.setdefault(from_state, set()).update(to_states)
        self._edges: Mapping[State, frozenset[State]] = MappingProxyType(
            {src: frozenset(dst) for src, dst in merged.items()}
        )

    def has(self, from_state: State, to_state: State) -> bool:
        targets = self._edges.get(from_state)
        return targets is not None and to_state in targets

    def targets(self, from_state: State) -> frozenset[State]:
        return self._edges.get(from_state, frozenset())

    def __contains__(self, from_state: object) -> bool:
        return from_state in self._edges

    def __iter__(self) -> Iterator[State]:
        return iter(self._edges)

    def __len__(self) -> int:
        return len(self._edges)


class ActionTable:
    """Maps action names to the (from, to) State pairs they may trigger.

    At most one pair per (action, from) is allowed; a duplicate raises
    ValueError.
    """

    __slots__ = ("_actions",)

    def __init__(
        self, actions: Iterable[tuple[str, Iterable[tuple[State, State]]]] = (),
    ) -> None:
        table: dict[str, list[tuple[State, State]]] = {}
        for action_name, pairs in actions:
            variants = table.setdefault(action_name, [])
            for from_state, to_state in pairs:
                if any(src is from_state for src, _ in variants):
                    raise ValueError(
                        f"Action '{action_name}' is defined twice "
                        f"from state '{from_state}'"
                    )
                variants.append((from_state, to_state))
        self._actions: Mapping[str, tuple[tuple[State, State], ...]] = MappingProxyType(
            {name: tuple(pairs) for name, pairs in table.items()}
        )

    def get(self, action_name: str) -> tuple[tuple[State, State], ...] | None:
        return self._actions.get(action_name)

    def target(self, action_name: str, from_state: State) -> State | None:
        """Return the destination for ``action_name`` from ``from_state``, if any."""
        for src, dst in self._actions.get(action_name, ()):
            if src is from_state:
                return dst
        return None

    def names(self) -> list[str]:
        """List all action names in definition order."""
        return list(self._actions)

    def __contains__(self, action_name: object) -> bool:
        return action_name in self._actions

    def __len__(self) -> int:
        return len(self._actions)

"""lifecycle-fsm - Finite state machines with lifecycle hooks and named actions."""
from __future__ import annotations

from lifecycle_fsm.builder import StateMachineBuilder
from lifecycle_fsm.errors import FsmError
from lifecycle_fsm.graph import ActionTable, TransitionGraph
from lifecycle_fsm.machine import StateMachine
from lifecycle_fsm.state import State, StateEncoder, StateHooks

__all__ = [
    "State",
    "StateHooks",
    "StateEncoder",
    "TransitionGraph",
    "ActionTable",
    "StateMachine",
    "StateMachineBuilder",
    "FsmError",
]

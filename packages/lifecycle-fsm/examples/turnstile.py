"""Turnstile -- action-triggered transitions.

Demonstrates:
- Named actions defined with the dict form of with_transitions
- trigger() ignoring actions that do not apply to the current state
- can() / available_actions() queries

Run: python -m examples.turnstile
"""

import asyncio

from lifecycle_fsm import StateMachineBuilder

smb_turnstile = (
    StateMachineBuilder()
    .with_states(["locked", "unlocked"])
    .with_transitions([
        ("locked", {"coin": "unlocked"}),
        ("unlocked", {"push": "locked"}),
    ])
)


async def main() -> None:
    print("=== Turnstile ===\n")

    sm = smb_turnstile.build("locked")

    def log_current_state(action: str) -> None:
        print(f"  {action:<8} -> {sm.current_state}  (can: {sm.available_actions()})")

    log_current_state("start")
    for action in ("coin", "coin", "push", "push"):
        await sm.trigger(action)
        log_current_state(action)


if __name__ == "__main__":
    asyncio.run(main())

"""Project lifecycle -- hooks that persist each transition.

Demonstrates:
- One builder shared by many entities
- Async on_entry hooks writing to a (fake) storage service
- A before_exit veto reading the opaque context
- maybe_change_state for transitions that are allowed to fail

Run: python -m examples.project
"""

import asyncio
import json
import random
from dataclasses import dataclass, field
from enum import Enum

from lifecycle_fsm import State, StateEncoder, StateMachine, StateMachineBuilder


class ProjectStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

@dataclass
class ProjectService:
    projects: dict[int, dict] = field(default_factory=dict)

    async def create_project(self, name: str) -> dict:
        await asyncio.sleep(random.uniform(0.01, 0.05))
        project_id = len(self.projects) + 1
        self.projects[project_id] = {
            "id": project_id, "name": name, "status": ProjectStatus.PENDING.value,
        }
        return self.projects[project_id]

    async def update_project(self, project_id: int, **patch: object) -> None:
        await asyncio.sleep(random.uniform(0.01, 0.05))
        self.projects[project_id].update(patch)


@dataclass
class ProjectContext:
    service: ProjectService
    project_id: int


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------

async def save_status(from_state: State, to_state: State, ctx: ProjectContext) -> None:
    await ctx.service.update_project(ctx.project_id, status=to_state.name)


async def activate(from_state: State, to_state: State, ctx: ProjectContext) -> None:
    await ctx.service.update_project(ctx.project_id, status=to_state.name, activated=True)


def has_name(from_state: State, to_state: State, ctx: ProjectContext) -> bool:
    return bool(ctx.service.projects[ctx.project_id]["name"])


smb_project = (
    StateMachineBuilder()
    .with_states(
        [ProjectStatus.PENDING, ProjectStatus.ARCHIVED, ProjectStatus.COMPLETED],
        {"on_entry": save_status},
    )
    .with_state(ProjectStatus.ACTIVE, {"on_entry": activate})
    .with_state(ProjectStatus.PENDING, {"before_exit": has_name})
    .with_transitions([
        (ProjectStatus.PENDING, [ProjectStatus.ACTIVE, ProjectStatus.ARCHIVED]),
        (ProjectStatus.ACTIVE, [ProjectStatus.COMPLETED]),
        (ProjectStatus.ARCHIVED, [ProjectStatus.PENDING]),
    ])
)


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------

def log_project(label: str, service: ProjectService, sm: StateMachine, project_id: int) -> None:
    print(f"  {label:<24} {service.projects[project_id]}")
    print(f"  {'':<24} transitions: {json.dumps(sm.allowed_transition_states(), cls=StateEncoder)}")


async def main() -> None:
    print("=== Project lifecycle ===\n")
    service = ProjectService()
    first = await service.create_project("my first project")
    second = await service.create_project("my second project")
    unnamed = await service.create_project("")

    sm = smb_project.build(first["status"])
    ctx = ProjectContext(service, first["id"])
    log_project("[project 1] initial", service, sm, ctx.project_id)
    await sm.try_change_state(ProjectStatus.ACTIVE, ctx)
    log_project("[project 1] activated", service, sm, ctx.project_id)
    await sm.try_change_state(ProjectStatus.COMPLETED, ctx)
    log_project("[project 1] completed", service, sm, ctx.project_id)

    print("  ---------")
    sm = smb_project.build(second["status"])
    ctx = ProjectContext(service, second["id"])
    await sm.try_change_state(ProjectStatus.ARCHIVED, ctx)
    log_project("[project 2] archived", service, sm, ctx.project_id)

    print("  ---------")
    sm = smb_project.build(unnamed["status"])
    ctx = ProjectContext(service, unnamed["id"])
    result = await sm.maybe_change_state(ProjectStatus.ACTIVE, ctx)
    print(f"  [project 3] activation without a name -> {result}")
    log_project("[project 3] unchanged", service, sm, ctx.project_id)


if __name__ == "__main__":
    asyncio.run(main())

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActorRole(str, Enum):
    customer = "customer"
    staff = "staff"
    admin = "admin"
    system = "system"


@dataclass(frozen=True)
class Actor:
    actor_id: str
    role: ActorRole

    @property
    def is_staff(self) -> bool:
        return self.role in (ActorRole.staff, ActorRole.admin)


SYSTEM_ACTOR = Actor(actor_id="system", role=ActorRole.system)

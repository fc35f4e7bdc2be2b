from fastapi import Header, HTTPException

from booking_core.domain.entities.actor import Actor, ActorRole

# Roles an upstream auth gateway may assert; "system" is internal only.
_CALLER_ROLES = {ActorRole.customer, ActorRole.staff, ActorRole.admin}


def get_actor(
    x_actor_id: str | None = Header(None),
    x_actor_role: str | None = Header(None),
) -> Actor:
    """Actor identity forwarded by the authenticating gateway. Credentials are not re-checked here."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(status_code=401, detail="Sign in to continue")
    try:
        role = ActorRole(x_actor_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown actor role {x_actor_role!r}")
    if role not in _CALLER_ROLES:
        raise HTTPException(status_code=400, detail=f"Role {role.value} cannot be asserted by callers")
    return Actor(actor_id=x_actor_id.strip(), role=role)


def get_staff_actor(
    x_actor_id: str | None = Header(None),
    x_actor_role: str | None = Header(None),
) -> Actor:
    actor = get_actor(x_actor_id, x_actor_role)
    if not actor.is_staff:
        raise HTTPException(status_code=403, detail="Staff access required")
    return actor

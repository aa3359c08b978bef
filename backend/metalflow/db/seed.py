"""Idempotent seeding of the built-in roles."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from metalflow.core.auth import ROLE_ADMIN, ROLE_DEVELOPER, ROLE_OWNER, ROLE_USER
from metalflow.models.identity import Role
from metalflow.services.user_store import normalize

logger = logging.getLogger(__name__)

DEFAULT_ROLES = (ROLE_ADMIN, ROLE_OWNER, ROLE_DEVELOPER, ROLE_USER)


async def seed_roles(session: AsyncSession) -> list[str]:
    """Create any missing built-in role. Returns the names created."""
    result = await session.execute(select(Role.normalized_name))
    existing = set(result.scalars().all())

    created: list[str] = []
    for name in DEFAULT_ROLES:
        if normalize(name) in existing:
            continue
        session.add(Role(name=name, normalized_name=normalize(name)))
        created.append(name)

    if created:
        await session.flush()
        logger.info("Seeded roles: %s", ", ".join(created))
    return created

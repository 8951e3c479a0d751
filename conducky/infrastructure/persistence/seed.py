"""Database seed data: the role catalog."""

import logging
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from conducky.domain.auth.model.role import ROLE_CATALOG

logger = logging.getLogger(__name__)


async def ensure_role_catalog(engine: AsyncEngine) -> int:
    """Insert any missing catalog roles. Idempotent; returns how many were added."""
    added = 0
    async with engine.begin() as conn:
        for name, scope, level, description in ROLE_CATALOG:
            result = await conn.execute(
                text(
                    "INSERT INTO roles (id, name, scope, level, description) "
                    "VALUES (:id, :name, :scope, :level, :description) "
                    "ON CONFLICT (name) DO NOTHING"
                ),
                {
                    "id": str(uuid4()),
                    "name": name.value,
                    "scope": scope.value,
                    "level": level,
                    "description": description,
                },
            )
            added += result.rowcount or 0
    logger.info("Role catalog seeded (%d added, %d total)", added, len(ROLE_CATALOG))
    return added

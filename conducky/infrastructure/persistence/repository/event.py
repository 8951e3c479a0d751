"""Event lookups used by RBAC and the contact-email migration."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from conducky.domain.auth.port.scope_lookup import EventLookup
from conducky.domain.settings.port.event_repository import EventContactRepository
from conducky.infrastructure.persistence.tables import events_table


class SqlEventLookup(EventLookup):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_event_id_by_slug(self, slug: str) -> str | None:
        stmt = select(events_table.c.id).where(events_table.c.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_organization_id(self, event_id: str) -> str | None:
        stmt = select(events_table.c.organization_id).where(events_table.c.id == event_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class SqlEventContactRepository(EventContactRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_contact_emails(self) -> list[tuple[str, str | None]]:
        stmt = select(events_table.c.id, events_table.c.contact_email).order_by(events_table.c.id)
        result = await self.session.execute(stmt)
        return [(row.id, row.contact_email) for row in result.all()]

    async def set_contact_email(self, event_id: str, contact_email: str) -> None:
        stmt = (
            update(events_table)
            .where(events_table.c.id == event_id)
            .values(contact_email=contact_email)
        )
        await self.session.execute(stmt)
        await self.session.flush()

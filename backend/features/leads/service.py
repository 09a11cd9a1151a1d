"""
backend/features/leads/service.py

Remote lead store backed by the `leads` table.

Operations:
- register_lead: insert-if-absent keyed by contact handle
- get_lead: read one by contact handle (access check)
- increment_usage: bump usage_count and stamp last_usage_at
- list_leads: all leads, newest first (admin)
- update_limit: admin override of usage_limit by id
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from backend.core.database import create_all_tables, get_db_session, init_engine, leads
from backend.core.errors import NotFoundError, ValidationError
from backend.models.lead import Identity, Lead

logger = logging.getLogger("codeprompt.leads")


def _row_to_lead(row) -> Lead:
    return Lead(
        id=row.id,
        name=row.name,
        whatsapp=row.whatsapp,
        email=row.email,
        usage_count=row.usage_count,
        usage_limit=row.usage_limit,
        created_at=row.created_at,
        last_usage_at=row.last_usage_at,
    )


class LeadStore:
    """Thin persistence layer over the global engine in backend.core.database."""

    def __init__(self, default_limit: int = 1):
        self.default_limit = default_limit

    @classmethod
    def connect(cls, database_url: str, default_limit: int = 1) -> "LeadStore":
        init_engine(database_url)
        create_all_tables()
        return cls(default_limit=default_limit)

    def register_lead(self, identity: Identity) -> bool:
        """
        Insert a lead for `identity` unless its contact handle exists.

        Returns:
            True if a row was created, False if the lead was already there
        """
        if self.get_lead(identity.whatsapp) is not None:
            return False
        try:
            with get_db_session() as session:
                session.execute(
                    insert(leads).values(
                        id=str(uuid4()),
                        name=identity.name,
                        whatsapp=identity.whatsapp,
                        email=identity.email,
                        usage_count=0,
                        usage_limit=self.default_limit,
                        created_at=datetime.now(timezone.utc),
                    )
                )
        except IntegrityError:
            # Concurrent registration of the same handle
            return False
        logger.info("[leads] registered lead", extra={"event_type": "lead.registered"})
        return True

    def get_lead(self, whatsapp: str) -> Optional[Lead]:
        with get_db_session() as session:
            row = session.execute(select(leads).where(leads.c.whatsapp == whatsapp)).first()
            return _row_to_lead(row) if row else None

    def get_lead_by_id(self, lead_id: str) -> Optional[Lead]:
        with get_db_session() as session:
            row = session.execute(select(leads).where(leads.c.id == lead_id)).first()
            return _row_to_lead(row) if row else None

    def increment_usage(self, whatsapp: str) -> Optional[int]:
        """Add one use to the lead's counter. Returns the new count, None if unknown."""
        with get_db_session() as session:
            result = session.execute(
                update(leads)
                .where(leads.c.whatsapp == whatsapp)
                .values(
                    usage_count=leads.c.usage_count + 1,
                    last_usage_at=datetime.now(timezone.utc),
                )
            )
            if result.rowcount == 0:
                return None
            return session.execute(
                select(leads.c.usage_count).where(leads.c.whatsapp == whatsapp)
            ).scalar_one()

    def list_leads(self) -> List[Lead]:
        with get_db_session() as session:
            rows = session.execute(select(leads).order_by(leads.c.created_at.desc())).all()
            return [_row_to_lead(row) for row in rows]

    def update_limit(self, lead_id: str, new_limit: int) -> Lead:
        if new_limit < 0:
            raise ValidationError("O limite deve ser zero ou maior")
        with get_db_session() as session:
            result = session.execute(
                update(leads).where(leads.c.id == lead_id).values(usage_limit=new_limit)
            )
            if result.rowcount == 0:
                raise NotFoundError(f"Lead {lead_id} não encontrado")
        lead = self.get_lead_by_id(lead_id)
        logger.info(
            "[leads] usage limit updated",
            extra={"event_type": "lead.limit_updated", "status": new_limit},
        )
        return lead

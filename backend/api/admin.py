"""
Admin API routes for lead management.

All routes require the admin key (X-Admin-Key header, or the admin_key query
parameter outside prod) and a configured remote lead store.
"""
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from backend.core.admin_auth import AdminActor, require_admin
from backend.core.errors import RemoteStoreDisabledError
from backend.core.logging import log_event
from backend.features.leads.service import LeadStore
from backend.models.lead import Lead

router = APIRouter(prefix="/api/admin", tags=["admin"])


class UpdateLimitRequest(BaseModel):
    usage_limit: int = Field(ge=0)


def get_lead_store(request: Request) -> LeadStore:
    leads = getattr(request.app.state, "leads", None)
    if leads is None:
        raise RemoteStoreDisabledError("O banco de leads não está configurado.")
    return leads


def _lead_payload(lead: Lead) -> dict:
    return {
        **lead.model_dump(mode="json"),
        "limit_reached": lead.limit_reached,
        "contact_url": lead.contact_url(),
    }


@router.get("/leads")
def list_leads(
    actor: AdminActor = Depends(require_admin),
    leads: LeadStore = Depends(get_lead_store),
) -> dict:
    """All leads, newest first."""
    rows = leads.list_leads()
    return {
        "count": len(rows),
        "leads": [_lead_payload(lead) for lead in rows],
    }


@router.post("/leads/{lead_id}/limit")
def update_lead_limit(
    lead_id: str,
    body: UpdateLimitRequest,
    actor: AdminActor = Depends(require_admin),
    leads: LeadStore = Depends(get_lead_store),
) -> dict:
    """Override a lead's usage limit."""
    lead = leads.update_limit(lead_id, body.usage_limit)
    log_event(
        "info",
        "admin.lead_limit_updated",
        event_type="admin.lead_limit_updated",
        extra={"actor_id": actor.actor_id, "lead_id": lead_id, "usage_limit": body.usage_limit},
    )
    return _lead_payload(lead)

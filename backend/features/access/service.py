"""
backend/features/access/service.py

Access gate: may this session run a gated feature right now?

Decision order:
1. No identity stored locally -> deny, registration required
2. Remote lead store configured -> allowed iff lead usage_count < usage_limit
3. Otherwise -> allowed iff local count for the feature < free uses per feature

Usage recording is a two-step saga: the local increment always lands first;
the remote increment follows and, on failure, is logged and reported in the
receipt without rolling back the local step. The remote counter is advisory.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from backend.core.config import StudioConfig
from backend.core.errors import AccessDeniedError, ConflictError
from backend.core.logging import log_event
from backend.features.leads.service import LeadStore
from backend.features.usage.service import LocalUsageStore
from backend.models.lead import Identity
from backend.models.usage import UsageReceipt

logger = logging.getLogger("codeprompt.access")

REASON_REGISTRATION = "registration_required"
REASON_LIMIT = "usage_limit_reached"
REASON_LEAD_MISSING = "lead_not_found"
REASON_REMOTE_UNAVAILABLE = "remote_unavailable"

_DENIAL_MESSAGES = {
    REASON_REGISTRATION: "Cadastre-se para continuar usando esta ferramenta.",
    REASON_LIMIT: "Você atingiu o limite de uso gratuito. Fale conosco para liberar mais gerações.",
    REASON_LEAD_MISSING: "Não encontramos seu cadastro. Cadastre-se novamente para continuar.",
    REASON_REMOTE_UNAVAILABLE: "Não foi possível verificar seu acesso agora. Tente novamente em instantes.",
}


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    limit_reached: bool = False
    reason: Optional[str] = None


ALLOWED = AccessDecision(allowed=True)


class AccessGate:
    def __init__(self, config: StudioConfig, local: LocalUsageStore, leads: Optional[LeadStore] = None):
        if config.remote_enabled and leads is None:
            raise ValueError("remote store enabled but no LeadStore provided")
        self.config = config
        self.local = local
        self.leads = leads if config.remote_enabled else None

    def check_access(self, feature: str) -> AccessDecision:
        identity = self.local.get_identity()
        if identity is None:
            return AccessDecision(allowed=False, reason=REASON_REGISTRATION)

        if self.leads is not None:
            try:
                lead = self.leads.get_lead(identity.whatsapp)
            except SQLAlchemyError:
                logger.error("[access] remote lookup failed", exc_info=True, extra={"feature": feature})
                return AccessDecision(allowed=False, reason=REASON_REMOTE_UNAVAILABLE)
            if lead is None:
                return AccessDecision(allowed=False, reason=REASON_LEAD_MISSING)
            if lead.limit_reached:
                return AccessDecision(allowed=False, limit_reached=True, reason=REASON_LIMIT)
            return ALLOWED

        if self.local.has_reached_limit(feature, self.config.usage.free_uses_per_feature):
            return AccessDecision(allowed=False, limit_reached=True, reason=REASON_LIMIT)
        return ALLOWED

    def require_access(self, feature: str) -> None:
        """Raise AccessDeniedError when check_access denies."""
        decision = self.check_access(feature)
        if decision.allowed:
            return
        log_event(
            "info",
            "access.denied",
            feature=feature,
            event_type="access.denied",
            error_code=decision.reason,
            extra={"limit_reached": decision.limit_reached},
        )
        raise AccessDeniedError(
            _DENIAL_MESSAGES[decision.reason],
            code=decision.reason,
            limit_reached=decision.limit_reached,
        )

    def record_usage(self, feature: str) -> UsageReceipt:
        local_count = self.local.increment_usage_count(feature)

        if self.leads is None:
            log_event("info", "usage.recorded", feature=feature, event_type="usage.recorded")
            return UsageReceipt(feature=feature, local_count=local_count)

        identity = self.local.get_identity()
        if identity is None:
            return UsageReceipt(feature=feature, local_count=local_count)

        try:
            remote_count = self.leads.increment_usage(identity.whatsapp)
        except SQLAlchemyError as exc:
            logger.warning(
                "[access] remote usage increment failed; local count kept",
                extra={"feature": feature, "event_type": "usage.remote_sync_failed"},
            )
            return UsageReceipt(
                feature=feature,
                local_count=local_count,
                remote_attempted=True,
                remote_synced=False,
                remote_error=str(exc),
            )

        if remote_count is None:
            logger.warning(
                "[access] lead missing during usage increment",
                extra={"feature": feature, "event_type": "usage.remote_sync_failed"},
            )
            return UsageReceipt(
                feature=feature,
                local_count=local_count,
                remote_attempted=True,
                remote_synced=False,
                remote_error=REASON_LEAD_MISSING,
            )

        log_event("info", "usage.recorded", feature=feature, event_type="usage.recorded")
        return UsageReceipt(feature=feature, local_count=local_count, remote_attempted=True, remote_synced=True)

    def register(self, identity: Identity) -> Identity:
        """Persist identity locally, mirroring it remotely when configured."""
        if self.local.get_identity() is not None:
            raise ConflictError("Este navegador já possui um cadastro.")
        self.local.save_identity(identity)

        if self.leads is not None:
            try:
                created = self.leads.register_lead(identity)
            except SQLAlchemyError:
                logger.warning(
                    "[access] remote registration failed; identity kept locally",
                    exc_info=True,
                    extra={"event_type": "lead.remote_sync_failed"},
                )
            else:
                if not created:
                    logger.info("[access] lead already registered remotely", extra={"event_type": "lead.exists"})

        log_event("info", "identity.registered", event_type="identity.registered")
        return identity

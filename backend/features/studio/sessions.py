"""In-process registry of studio sessions keyed by the X-Session-Id header.

Sessions idle for longer than `session_idle_seconds` are dropped on the next
lookup, and the least recently used ones go first once `max_sessions` is
exceeded. A file-backed local store outlives its session, so a returning
client with the same id gets its identity and usage back.
"""

import logging
import re
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple
from uuid import uuid4

from backend.core.config import StudioConfig
from backend.core.errors import ValidationError
from backend.features.ai.adapter import GenerativeAdapter
from backend.features.leads.service import LeadStore
from backend.features.studio.controller import StudioSession
from backend.features.usage.service import build_local_store

logger = logging.getLogger("codeprompt.studio")

SESSION_HEADER = "X-Session-Id"

# Session ids name a directory under LOCAL_STORE_DIR
_SESSION_ID = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


class SessionRegistry:
    def __init__(
        self,
        config: StudioConfig,
        adapter: GenerativeAdapter,
        leads: Optional[LeadStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.adapter = adapter
        self.leads = leads
        self.clock = clock
        # session id -> (session, last seen), least recently used first
        self._sessions: "OrderedDict[str, Tuple[StudioSession, float]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def _evict(self, now: float) -> None:
        cutoff = now - self.config.session_idle_seconds
        expired = [sid for sid, (_, seen) in self._sessions.items() if seen <= cutoff]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(
                "[studio] idle sessions dropped",
                extra={"event_type": "session.evicted", "status": len(expired)},
            )

    def get_or_create(self, session_id: Optional[str] = None) -> StudioSession:
        if session_id:
            if not _SESSION_ID.match(session_id):
                raise ValidationError("Identificador de sessão inválido")
        else:
            session_id = uuid4().hex

        now = self.clock()
        self._evict(now)
        entry = self._sessions.pop(session_id, None)

        if entry is None:
            session = StudioSession(
                session_id=session_id,
                config=self.config,
                adapter=self.adapter,
                local=build_local_store(self.config.local_store_dir, session_id),
                leads=self.leads,
            )
            logger.info("[studio] session opened", extra={"session_id": session_id, "event_type": "session.opened"})
        else:
            session = entry[0]

        self._sessions[session_id] = (session, now)
        while len(self._sessions) > self.config.max_sessions:
            self._sessions.popitem(last=False)
        return session

"""Application-lifetime sign-in state.

One ``SessionContext`` is built at startup and kept on ``app.state``. In
offline mode the session survives restarts through local storage; against the
remote store it only lives in memory, since the hosted auth provider owns the
real session.
"""

import json
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, Request, status

from .constants import OFFLINE_SESSION_KEY
from .store import LocalStorage

logger = logging.getLogger(__name__)


@dataclass
class Session:
    email: str
    token: str
    signed_in_at: datetime


class SessionContext:
    def __init__(self, storage: LocalStorage, offline: bool) -> None:
        self.storage = storage
        self.offline = offline
        self.current: Optional[Session] = None

    @property
    def authenticated(self) -> bool:
        return self.current is not None

    def restore(self) -> Optional[Session]:
        """Reload a persisted offline session. Any failure means "no session"."""
        if not self.offline:
            return None
        try:
            raw = self.storage.get_item(OFFLINE_SESSION_KEY)
            if raw:
                data = json.loads(raw)
                self.current = Session(
                    email=data["email"],
                    token=data["token"],
                    signed_in_at=datetime.fromisoformat(data["signed_in_at"]),
                )
        except Exception:
            logger.exception("Error restoring offline session")
            self.current = None
        return self.current

    def sign_in(self, email: str) -> Session:
        session = Session(email=email.strip(), token=secrets.token_hex(16), signed_in_at=datetime.now(timezone.utc))
        if self.offline:
            self.storage.set_item(
                OFFLINE_SESSION_KEY,
                json.dumps(
                    {"email": session.email, "token": session.token, "signed_in_at": session.signed_in_at.isoformat()}
                ),
            )
        self.current = session
        logger.info("Signed in as %s (%s mode)", session.email, "offline" if self.offline else "online")
        return session

    def sign_out(self) -> None:
        if self.offline:
            self.storage.remove_item(OFFLINE_SESSION_KEY)
        self.current = None


def get_session(request: Request) -> SessionContext:
    return request.app.state.session


def require_session(request: Request) -> Session:
    context = get_session(request)
    if context.current is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in required")
    return context.current

"""
Session backends.

Both backends mint the same signed tokens and expose the same
``issue``/``resolve``/``revoke`` surface, so the Auth Service can switch
between them through ``SESSION_BACKEND`` without touching its callers.

- ``StatelessSessions`` verifies tokens from their own signed claims only.
- ``RevocableSessions`` additionally keeps a server-side table of revoked
  token ids, checked on every ``resolve``.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..DB import atomic
from ..errors import InvalidToken, Unauthenticated
from ..models import RevokedToken
from ..security import create_access_token, decode_access_token
from ..settings import Settings

logger = logging.getLogger(__name__)


class StatelessSessions:
    supports_revocation = False

    def __init__(self, settings: Settings):
        self.settings = settings

    def issue(self, user_id: int) -> str:
        return create_access_token({'sub': str(user_id)}, self.settings)

    def claims(self, token: str | None) -> dict:
        if not token:
            raise Unauthenticated()
        return decode_access_token(token, self.settings)

    def resolve(self, token: str | None) -> int:
        return self.claims(token)['sub']

    def revoke(self, token: str | None) -> bool:
        # Nothing to record; the token stays valid until it expires
        self.claims(token)
        return False


class RevocableSessions(StatelessSessions):
    supports_revocation = True

    def __init__(self, settings: Settings, session: Session):
        super().__init__(settings)
        self.session = session

    def claims(self, token: str | None) -> dict:
        payload = super().claims(token)
        jti = payload.get('jti')
        if not jti:
            raise InvalidToken('missing jti')
        if self.session.get(RevokedToken, jti) is not None:
            raise InvalidToken('revoked')
        return payload

    def revoke(self, token: str | None) -> bool:
        payload = self.claims(token)
        expires_at = datetime.fromtimestamp(payload['exp'], tz=timezone.utc)
        try:
            with atomic(self.session):
                self.session.add(
                    RevokedToken(jti=payload['jti'], user_id=payload['sub'], expires_at=expires_at)
                )
        except IntegrityError:
            # Revoked concurrently by another request
            pass
        logger.info(f"Session revoked for user {payload['sub']}")
        return True

    def purge_expired(self) -> int:
        """Drop revocation records whose tokens have expired anyway."""
        now = datetime.now(timezone.utc)
        with atomic(self.session):
            result = self.session.execute(
                delete(RevokedToken).where(RevokedToken.expires_at < now)
            )
        return result.rowcount or 0


def build_sessions(settings: Settings, session: Session) -> StatelessSessions:
    if settings.SESSION_BACKEND == 'revocable':
        return RevocableSessions(settings, session)
    return StatelessSessions(settings)

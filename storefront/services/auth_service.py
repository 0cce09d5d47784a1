"""
Authentication service

Registers users, checks login credentials and issues/validates the bearer
tokens that every protected catalog operation relies on.
"""

import logging

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..DB import atomic
from ..errors import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidInput,
    InvalidToken,
    describe_validation_error,
)
from ..models import User
from ..schemas import UserCreate
from ..security import get_password_hash, verify_against_dummy, verify_password
from ..settings import Settings
from .sessions import StatelessSessions, build_sessions

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """User accounts and session tokens"""

    def __init__(self, session: Session, settings: Settings, sessions: StatelessSessions | None = None):
        self.session = session
        self.settings = settings
        self.sessions = sessions or build_sessions(settings, session)

    def get_user_by_email(self, email: str) -> User | None:
        return self.session.scalar(select(User).where(User.email == normalize_email(email)))

    def register(self, email: str, password: str, name: str | None = None) -> tuple[User, str]:
        """
        Create a user and open a session for it.

        Returns:
            (user, token)

        Raises:
            InvalidInput: malformed email or password shorter than PASSWORD_MIN_LENGTH
            DuplicateEmail: email already registered (case-insensitive)
        """
        try:
            data = UserCreate(email=normalize_email(email or ''), password=password, name=name)
        except ValidationError as exc:
            raise InvalidInput(describe_validation_error(exc.errors()))

        if len(data.password) < self.settings.PASSWORD_MIN_LENGTH:
            raise InvalidInput(
                f'password: must be at least {self.settings.PASSWORD_MIN_LENGTH} characters'
            )

        email = normalize_email(str(data.email))
        if self.get_user_by_email(email):
            raise DuplicateEmail()

        user = User(
            email=email,
            password_hash=get_password_hash(data.password),
            name=data.name,
        )
        try:
            with atomic(self.session):
                self.session.add(user)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            raise DuplicateEmail()
        self.session.refresh(user)

        logger.info(f"User {user.id} registered")
        return user, self.sessions.issue(user.id)

    def login(self, email: str, password: str) -> str:
        user = self.get_user_by_email(email or '')
        if user is None:
            verify_against_dummy(password or '')
            logger.info("Login failed")
            raise InvalidCredentials()
        if not verify_password(password or '', user.password_hash):
            logger.info("Login failed")
            raise InvalidCredentials()

        return self.sessions.issue(user.id)

    def validate(self, token: str | None) -> int:
        """Return the user id bound to a valid token. No database lookup
        is needed with the stateless backend."""
        return self.sessions.resolve(token)

    def current_user(self, token: str | None) -> User:
        user_id = self.validate(token)
        user = self.session.get(User, user_id)
        if user is None:
            raise InvalidToken('user no longer exists')
        return user

    def refresh(self, token: str | None) -> str:
        user = self.current_user(token)
        return self.sessions.issue(user.id)

    def logout(self, token: str | None) -> bool:
        return self.sessions.revoke(token)

# storefront/security.py
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from uuid import uuid4

from fastapi.security import OAuth2PasswordBearer
from jwt import ExpiredSignatureError, InvalidTokenError, decode, encode
from pwdlib import PasswordHash

from .errors import InvalidToken
from .settings import Settings

pwd_context = PasswordHash.recommended()
# auto_error=False: a missing header reaches the services as None
oauth2_scheme = OAuth2PasswordBearer(tokenUrl='auth/token', auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@lru_cache
def _dummy_hash() -> str:
    return pwd_context.hash(uuid4().hex)


def verify_against_dummy(plain_password: str) -> bool:
    """Burn the same hashing work as a real check when there is no user."""
    verify_password(plain_password, _dummy_hash())
    return False


def create_access_token(data: dict, settings: Settings) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({'iat': now, 'exp': expire, 'jti': uuid4().hex})
    return encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    """
    Verify signature and expiry and return the claims.

    Raises InvalidToken for anything that is not a well formed, unexpired
    token signed with our key and bound to a numeric user id.
    """
    try:
        payload = decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={'require': ['sub', 'exp']},
        )
    except ExpiredSignatureError:
        raise InvalidToken('expired')
    except InvalidTokenError as exc:
        raise InvalidToken(type(exc).__name__)

    try:
        payload['sub'] = int(payload['sub'])
    except (TypeError, ValueError):
        raise InvalidToken('subject is not a user id')
    return payload

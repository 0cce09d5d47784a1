# storefront/routers/users.py
from http import HTTPStatus

from fastapi import APIRouter

from .. import schemas
from ..deps import T_AuthService, T_Token

router = APIRouter(prefix='/api/users', tags=['users'])


@router.post(
    '/register', status_code=HTTPStatus.CREATED, response_model=schemas.Registration
)
def register(payload: schemas.UserCreate, auth: T_AuthService):
    """Create an account and return it together with a session token."""
    user, token = auth.register(payload.email, payload.password, payload.name)
    return {'user': user, 'token': token, 'token_type': 'bearer'}


@router.post('/login', response_model=schemas.Token)
def login(payload: schemas.LoginSchema, auth: T_AuthService):
    return {'token': auth.login(payload.email, payload.password), 'token_type': 'bearer'}


@router.get('/profile', response_model=schemas.UserPublic)
def read_profile(auth: T_AuthService, token: T_Token):
    """Return the authenticated user."""
    return auth.current_user(token)

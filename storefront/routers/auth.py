from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from .. import schemas
from ..deps import T_AuthService, T_Token
from . import users

router = APIRouter(prefix='/auth', tags=['auth'])

# Same endpoints as /api/users/register and /api/users/login
router.add_api_route(
    '/register',
    users.register,
    methods=['POST'],
    status_code=HTTPStatus.CREATED,
    response_model=schemas.Registration,
)
router.add_api_route('/login', users.login, methods=['POST'], response_model=schemas.Token)


# OAuth2 password flow, used by the "Authorize" button of the docs.
# The form's username field carries the email.
@router.post('/token', response_model=schemas.OAuth2Token)
def login_for_access_token(
        form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
        auth: T_AuthService,
):
    access_token = auth.login(form_data.username, form_data.password)
    return {'access_token': access_token, 'token_type': 'bearer'}


@router.post('/refresh_token', response_model=schemas.Token)
def refresh_access_token(auth: T_AuthService, token: T_Token):
    return {'token': auth.refresh(token), 'token_type': 'bearer'}


@router.post('/logout', response_model=schemas.LogoutResult)
def logout(auth: T_AuthService, token: T_Token):
    """Revoke the presented token. Only the revocable session backend
    can do this; the stateless one reports ``revoked: false``."""
    return {'revoked': auth.logout(token)}

"""
Auth API Router - exchange the shared secret phrase for a session token.

POST /api/auth/login {"secretPhrase": "..."}
  200 {"success": true, "token": "<jwt>"}
  400 {"success": false, "message": "..."}   phrase missing
  401 {"success": false, "message": "..."}   phrase wrong
  500 {"success": false, "message": "..."}   server misconfigured
"""

from logging import getLogger
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from dishka.integrations.fastapi import FromDishka, inject

from pairchat.application.commands.auth import LoginCommand, LoginHandler
from pairchat.application.dto.auth import LoginRequest, LoginResponse
from pairchat.domain.exceptions import AuthConfigurationError, InvalidCredential

logger = getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=LoginResponse(success=False, message=message).model_dump(exclude_none=True),
    )


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
@inject
async def login(
    body: LoginRequest,
    handler: FromDishka[LoginHandler],
):
    if not body.secret_phrase:
        return _failure(status.HTTP_400_BAD_REQUEST, "secretPhrase is required")

    try:
        token = await handler.execute(LoginCommand(secret_phrase=body.secret_phrase))
    except InvalidCredential as e:
        return _failure(status.HTTP_401_UNAUTHORIZED, e.message)
    except AuthConfigurationError:
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")

    return LoginResponse(success=True, token=token)

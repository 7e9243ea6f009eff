"""Auth API: sign-up, sign-in, sign-out, token refresh and password reset.

Routes delegate to AuthService; the identity provider behind it is bound to
the request's bearer token by get_identity_provider.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from portal.api.v1.dependencies import get_auth_service
from portal.application.use_cases.auth import AuthService
from portal.core.limiter import limit_auth
from portal.schemas.auth import (
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
    TokenResponse,
)

router = APIRouter()

AuthSvc = Annotated[AuthService, Depends(get_auth_service)]


@router.post("/sign-up", response_model=SignUpResponse, status_code=201)
@limit_auth
async def sign_up(request: Request, body: SignUpRequest, auth: AuthSvc):
    """Create an account with a client profile and sign it in."""
    result = await auth.sign_up(body.email, body.password, body.full_name)
    return SignUpResponse(
        user_id=result.identity.id,
        email=result.identity.email,
        access_token=result.access_token,
        needs_confirmation=result.needs_confirmation,
    )


@router.post("/sign-in", response_model=TokenResponse)
@limit_auth
async def sign_in(request: Request, body: SignInRequest, auth: AuthSvc):
    session = await auth.sign_in(body.email, body.password)
    return TokenResponse.from_session(session)


@router.post("/sign-out", status_code=204)
async def sign_out(auth: AuthSvc) -> Response:
    """Revoke the session behind the bearer token. No-op without a token."""
    await auth.sign_out()
    return Response(status_code=204)


@router.post("/refresh", response_model=TokenResponse)
@limit_auth
async def refresh(request: Request, auth: AuthSvc):
    """Extend the current session and return a fresh token for it."""
    session = await auth.refresh()
    return TokenResponse.from_session(session)


@router.post("/password-reset", response_model=MessageResponse, status_code=202)
@limit_auth
async def request_password_reset(
    request: Request, body: PasswordResetRequest, auth: AuthSvc
):
    """Send a reset link if the email is registered. Same answer either way."""
    await auth.request_password_reset(body.email)
    return MessageResponse(
        message="If the address is registered, a reset link has been sent"
    )


@router.post("/password-reset/confirm", response_model=MessageResponse)
@limit_auth
async def confirm_password_reset(
    request: Request, body: PasswordResetConfirm, auth: AuthSvc
):
    await auth.reset_password(body.token, body.password)
    return MessageResponse(message="Password updated; sign in again")

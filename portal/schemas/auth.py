"""Auth API schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, model_validator

from portal.domain.entities import AuthSession


class SignUpRequest(BaseModel):
    """Request body for public sign-up. The new account gets a client profile."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=256, description="Password (min 8 characters)")
    full_name: str | None = Field(default=None, max_length=200)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    """Request body for POST /auth/password-reset/confirm."""

    token: str = Field(..., min_length=1, description="One-time token from the reset link")
    password: str = Field(..., min_length=8, max_length=256)
    password_confirm: str = Field(..., min_length=8, max_length=256)

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordResetConfirm":
        if self.password != self.password_confirm:
            raise ValueError("password and password_confirm must match")
        return self


class TokenResponse(BaseModel):
    """Access token for the signed-in session."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime | None = None
    user_id: str
    email: str

    @classmethod
    def from_session(cls, session: AuthSession) -> "TokenResponse":
        return cls(
            access_token=session.access_token,
            expires_at=session.expires_at,
            user_id=session.identity.id,
            email=session.identity.email,
        )


class SignUpResponse(BaseModel):
    """Sign-up outcome. access_token is null while email confirmation is pending."""

    user_id: str
    email: str
    access_token: str | None = None
    token_type: str = "bearer"
    needs_confirmation: bool = False


class MessageResponse(BaseModel):
    message: str

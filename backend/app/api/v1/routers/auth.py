# app/api/v1/routers/auth.py
import logging

from fastapi import APIRouter, Depends, status

from app.api.v1.deps import get_current_user, get_token_service
from app.core.errors import InvalidLogin
from app.core.security import TokenService
from app.models.user import User
from app.schemas.auth import PROFILE_FIELD_MAP, LoginIn, ProfileUpdateIn, RegisterIn
from app.services import credential_store

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_to_dict(u: User) -> dict:
    """
    Convert User model instance to the profile shape used by the frontend.
    Never includes the password hash.
    """
    data = {"id": str(u.id), "email": u.email}
    for api_name, column in PROFILE_FIELD_MAP.items():
        data[api_name] = getattr(u, column)
    data["createdAt"] = u.created_at.isoformat() if u.created_at else None
    return data


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn, tokens: TokenService = Depends(get_token_service)):
    """
    Register a new business account and sign the caller in.

    Args:
        body: email, password (min 6 chars) and optional businessName,
            fullName, phoneNumber

    Returns:
        dict: {"success": True, "data": {"token": ..., "user": {...}}}

    Error codes:
        - VALIDATION_ERROR (400): malformed email / short password
        - DUPLICATE_EMAIL (400): email already registered
    """
    profile = {
        PROFILE_FIELD_MAP[k]: v
        for k, v in body.model_dump(include={"businessName", "fullName", "phoneNumber"}).items()
        if v is not None
    }
    user = await credential_store.create_user(body.email, body.password, profile)
    token = tokens.issue(user)
    return {"success": True, "data": {"token": token, "user": _user_to_dict(user)}}


@router.post("/login")
async def login(body: LoginIn, tokens: TokenService = Depends(get_token_service)):
    """
    Authenticate with email and password and return a fresh token.

    Raises:
        InvalidLogin (401): unknown email or wrong password (not distinguished)
    """
    user = await credential_store.authenticate(body.email, body.password)
    if not user:
        logger.info("[auth] failed login for email=%s", body.email)
        raise InvalidLogin()
    token = tokens.issue(user)
    return {"success": True, "data": {"token": token, "user": _user_to_dict(user)}}


@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user)):
    return {"success": True, "data": _user_to_dict(user)}


@router.patch("/profile")
async def update_profile(body: ProfileUpdateIn, user: User = Depends(get_current_user)):
    """
    Merge the provided profile fields into the caller's account.
    Fields left out of the body keep their stored value.
    """
    changes = {PROFILE_FIELD_MAP[k]: v for k, v in body.model_dump(exclude_unset=True).items()}
    updated = await credential_store.update_profile(user.id, changes)
    return {"success": True, "data": _user_to_dict(updated)}


@router.post("/logout")
async def logout(user: User = Depends(get_current_user)):
    """
    Revoke every token issued to the caller so far (all devices).
    The client must log in again to obtain a new token.
    """
    await credential_store.revoke_tokens(user)
    return {"success": True, "data": {"ok": True}}

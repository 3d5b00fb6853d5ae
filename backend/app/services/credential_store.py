# app/services/credential_store.py
"""
Credential store: persisted user accounts.

All reads and writes go straight to the database; nothing is cached in process.
Plain text passwords are hashed here and never stored or logged.
"""
import logging
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.expressions import F

from app.core.db import parse_uuid
from app.core.errors import DuplicateEmail, NotFound
from app.core.security import hash_password, verify_password
from app.models.user import PROFILE_FIELDS, User

logger = logging.getLogger("uvicorn.error")


async def create_user(email: str, password: str, profile: Optional[dict] = None) -> User:
    """
    Register a new account.

    Args:
        email: Login key (exact-match uniqueness, stored as given)
        password: Plain text password, hashed with argon2 before storage
        profile: Optional profile columns (see PROFILE_FIELDS)

    Raises:
        DuplicateEmail: An account with this email already exists
    """
    if await User.filter(email=email).exists():
        raise DuplicateEmail()

    extra = {k: v for k, v in (profile or {}).items() if k in PROFILE_FIELDS}
    try:
        user = await User.create(email=email, password_hash=hash_password(password), **extra)
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email
        raise DuplicateEmail() from exc
    logger.info("[auth] registered user id=%s email=%s", user.id, user.email)
    return user


async def find_by_email(email: str) -> Optional[User]:
    return await User.get_or_none(email=email)


async def find_by_id(user_id) -> Optional[User]:
    uid = parse_uuid(user_id)
    if uid is None:
        return None
    return await User.get_or_none(id=uid)


async def authenticate(email: str, password: str) -> Optional[User]:
    """Return the user if email and password match, otherwise None."""
    user = await find_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


async def update_profile(user_id, fields: dict) -> User:
    """
    Merge the provided profile fields into the stored user.

    Email, password hash and token version are never touched here; keys
    outside PROFILE_FIELDS are ignored.
    """
    user = await find_by_id(user_id)
    if not user:
        raise NotFound("User not found")

    changes = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
    if changes:
        for key, value in changes.items():
            setattr(user, key, value)
        await user.save(update_fields=[*changes.keys(), "updated_at"])
    return user


async def revoke_tokens(user: User) -> User:
    """Invalidate every token issued so far by bumping the token generation."""
    await User.filter(id=user.id).update(token_version=F("token_version") + 1)
    await user.refresh_from_db(fields=["token_version"])
    logger.info("[auth] revoked tokens for user id=%s (generation=%s)", user.id, user.token_version)
    return user

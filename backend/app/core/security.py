# app/core/security.py
"""
Security module for authentication.
Handles password hashing and identity token issuance/verification.
"""
import datetime as dt
from dataclasses import dataclass
from typing import Optional

import jwt  # PyJWT
from passlib.context import CryptContext

from app.config import settings

# Password hashing context
# Argon2 is a modern, salted, memory-hard password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)


class InvalidToken(Exception):
    """Raised when a token's signature, payload or expiry is not acceptable."""


@dataclass(frozen=True)
class TokenIdentity:
    """Identity asserted by a verified token, as of issuance time."""
    id: str
    email: str
    version: int = 0


class TokenService:
    """
    Issues and verifies signed, time-limited identity tokens.

    The signing secret and lifetime are injected once at construction; the
    service itself holds no other state.
    """

    def __init__(self, secret: str, expire_minutes: int, algorithm: str = JWT_ALG):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self.expire_minutes = expire_minutes
        self.algorithm = algorithm

    def issue(self, user, now: Optional[dt.datetime] = None) -> str:
        """
        Create a token for `user` (anything with id, email and token_version).

        Token payload includes:
            - id / email: identity at issuance time
            - ver: the user's token generation, used for revocation
            - iat / exp: issued-at and expiry timestamps
        """
        now = now or dt.datetime.now(dt.timezone.utc)
        payload = {
            "id": str(user.id),
            "email": user.email,
            "ver": int(getattr(user, "token_version", 0) or 0),
            "iat": now,
            "exp": now + dt.timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """
        Decode and validate a token.

        Raises:
            InvalidToken: bad signature, expired, or missing/malformed claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "id", "email"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidToken(str(exc)) from exc

        user_id, email, version = payload.get("id"), payload.get("email"), payload.get("ver", 0)
        if not isinstance(user_id, str) or not isinstance(email, str) or not isinstance(version, int):
            raise InvalidToken("malformed token payload")
        return TokenIdentity(id=user_id, email=email, version=version)


token_service = TokenService(settings.jwt_secret, settings.access_token_expire_minutes)

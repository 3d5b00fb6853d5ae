# app/api/v1/deps.py
from fastapi import Depends, Header, Request

from app.core.errors import InvalidCredential, MissingCredential
from app.core.security import InvalidToken, TokenIdentity, TokenService, token_service
from app.models.user import User
from app.services import credential_store
from app.services.vapi_client import VapiClient, vapi_client


def get_token_service() -> TokenService:
    return token_service


def get_vapi_client() -> VapiClient:
    return vapi_client


async def get_current_identity(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> TokenIdentity:
    """
    Resolve the bearer token in the Authorization header to a caller identity.

    Raises:
        MissingCredential: no "Authorization: Bearer <token>" header
        InvalidCredential: signature, payload or expiry rejected

    Both surface as the same 401 response. On success the identity is also
    attached to request.state.identity for downstream code.
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise MissingCredential()

    try:
        identity = tokens.verify(token)
    except InvalidToken as exc:
        raise InvalidCredential() from exc

    request.state.identity = identity
    return identity


async def get_current_user(identity: TokenIdentity = Depends(get_current_identity)) -> User:
    """
    FastAPI dependency returning the authenticated user row.

    A token whose user no longer exists, or whose generation was revoked
    (see credential_store.revoke_tokens), is rejected like any invalid token.

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    user = await credential_store.find_by_id(identity.id)
    if not user or user.token_version != identity.version:
        raise InvalidCredential()
    return user

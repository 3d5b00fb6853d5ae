# app/api/v1/routers/assistants.py
from fastapi import APIRouter, Depends, status

from app.api.v1.deps import get_current_user, get_vapi_client
from app.models.assistant import Assistant
from app.models.user import User
from app.schemas.assistant import AssistantCreateIn, AssistantUpdateIn
from app.services import assistant_sync
from app.services.assistant_registry import local_fields
from app.services.vapi_client import VapiClient

router = APIRouter(prefix="/assistants", tags=["assistants"])


def _assistant_to_dict(a: Assistant) -> dict:
    data = {"id": str(a.id), "externalId": a.external_id}
    data.update(local_fields(a))
    data["version"] = a.version
    data["createdAt"] = a.created_at.isoformat() if a.created_at else None
    data["updatedAt"] = a.updated_at.isoformat() if a.updated_at else None
    return data


@router.get("")
async def list_assistants(user: User = Depends(get_current_user)):
    """
    List the caller's assistants (newest first).
    Served from the local shadow rows; other tenants' assistants never appear.
    """
    rows = await assistant_sync.list_assistants(user.id)
    items = [_assistant_to_dict(a) for a in rows]
    return {"success": True, "data": {"items": items, "total": len(items)}}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_assistant(
    body: AssistantCreateIn,
    user: User = Depends(get_current_user),
    client: VapiClient = Depends(get_vapi_client),
):
    """
    Create an assistant on Vapi.ai and store its shadow row.

    Error codes:
        - VALIDATION_ERROR (400): checked before any provider call
        - UPSTREAM_ERROR (502): provider failed; nothing was stored
        - SERVER_ERROR (500): provider succeeded but the local write failed
    """
    row = await assistant_sync.create_assistant(client, user.id, body.to_fields())
    return {"success": True, "data": _assistant_to_dict(row)}


@router.get("/{aid}")
async def get_assistant(aid: str, user: User = Depends(get_current_user)):
    row = await assistant_sync.get_assistant(user.id, aid)
    return {"success": True, "data": _assistant_to_dict(row)}


@router.patch("/{aid}")
async def update_assistant(
    aid: str,
    body: AssistantUpdateIn,
    user: User = Depends(get_current_user),
    client: VapiClient = Depends(get_vapi_client),
):
    """
    Apply a partial update to one of the caller's assistants.

    Send the `version` from the last read to guard against overwriting a
    concurrent change.

    Error codes:
        - NOT_FOUND (404): no such assistant for this caller
        - CONFLICT (409): version mismatch / concurrent update
        - UPSTREAM_ERROR (502): provider failed; nothing changed locally
    """
    row = await assistant_sync.update_assistant(
        client, user.id, aid, body.to_fields(), expected_version=body.version
    )
    return {"success": True, "data": _assistant_to_dict(row)}


@router.delete("/{aid}")
async def delete_assistant(
    aid: str,
    user: User = Depends(get_current_user),
    client: VapiClient = Depends(get_vapi_client),
):
    deleted_id = await assistant_sync.delete_assistant(client, user.id, aid)
    return {"success": True, "data": {"id": deleted_id, "deleted": True}}

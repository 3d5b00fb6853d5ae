"""
Assistant synchronization

Keeps the provider (system of record) and the local shadow rows consistent
without a shared transaction:

- create: provider first, then the local row. A provider failure leaves no
  local row. A local failure after provider success triggers a compensating
  provider delete and a ReconciliationTask; the create is reported as failed.
- update: owner-scoped lookup, provider PATCH, then a version-checked local
  write. A provider failure leaves the row untouched. A local failure after
  provider success is recorded as a ReconciliationTask and reported as failed.
- delete: owner-scoped lookup, provider DELETE, then the local row.

Inputs are expected to be validated already (see app.schemas.assistant).
"""
import logging
from typing import Optional

from app.core.errors import Conflict, Inconsistency, NotFound
from app.models.assistant import Assistant
from . import assistant_registry as registry
from .assistant_mapping import to_provider_payload
from .vapi_client import VapiClient

logger = logging.getLogger("uvicorn.error")


async def list_assistants(owner_id) -> list[Assistant]:
    # Local shadow rows only; the provider collection is never listed
    return await registry.list_for_owner(owner_id)


async def get_assistant(owner_id, assistant_id) -> Assistant:
    row = await registry.get_for_owner(assistant_id, owner_id)
    if not row:
        raise NotFound("Assistant not found")
    return row


async def create_assistant(client: VapiClient, owner_id, fields: dict) -> Assistant:
    """
    Two-phase create (provider first).

    Raises:
        UpstreamError: provider rejected or could not be reached; nothing persisted
        Inconsistency: provider accepted but the local row could not be written
    """
    payload = to_provider_payload(fields, owner_id=str(owner_id))
    remote = await client.create_assistant(payload)  # UpstreamError propagates
    external_id = str(remote["id"])

    try:
        return await registry.insert(owner_id, external_id, fields)
    except Exception as exc:
        logger.exception(
            "[sync] local insert failed after provider create (external_id=%s owner=%s)",
            external_id, owner_id,
        )
        await _compensate_create(client, external_id, owner_id, fields, exc)
        raise Inconsistency(
            f"assistant {external_id} created on provider but not stored locally"
        ) from exc


async def _compensate_create(client: VapiClient, external_id: str, owner_id, fields: dict, cause: Exception) -> None:
    status = "pending"
    try:
        await client.delete_assistant(external_id)
        status = "compensated"
    except Exception:
        logger.exception("[sync] compensating delete failed for external_id=%s", external_id)

    await _record_drift(external_id, owner_id, "create", f"local insert failed: {cause!r}", fields, status)


async def _record_drift(external_id: str, owner_id, operation: str, reason: str, fields: dict, status: str = "pending") -> None:
    try:
        await registry.record_reconciliation(
            external_id=external_id,
            owner_id=owner_id,
            operation=operation,
            reason=reason,
            payload=fields,
            status=status,
        )
    except Exception:
        # The database is likely what failed in the first place; the log line is the record
        logger.exception(
            "[sync] RECONCILE operation=%s external_id=%s owner=%s status=%s",
            operation, external_id, owner_id, status,
        )


async def update_assistant(
    client: VapiClient,
    owner_id,
    assistant_id,
    fields: dict,
    expected_version: Optional[int] = None,
) -> Assistant:
    """
    Partial update (provider first, then a version-checked local write).

    Raises:
        NotFound: no row with this id owned by the caller
        Conflict: expected_version is stale, or a concurrent update won
        UpstreamError: provider update failed; local row unchanged
        Inconsistency: provider accepted but the local write failed
    """
    row = await get_assistant(owner_id, assistant_id)
    if expected_version is not None and expected_version != row.version:
        raise Conflict(f"Assistant is at version {row.version}, not {expected_version}")
    if not fields:
        return row

    current = registry.local_fields(row)
    payload = to_provider_payload(fields, owner_id=str(owner_id), partial=True, current=current)
    await client.update_assistant(row.external_id, payload)  # UpstreamError propagates

    try:
        updated = await registry.apply_update(row, fields)
    except Exception as exc:
        logger.exception(
            "[sync] local update failed after provider update (external_id=%s owner=%s)",
            row.external_id, owner_id,
        )
        await _record_drift(row.external_id, owner_id, "update", f"local update failed: {exc!r}", fields)
        raise Inconsistency(
            f"assistant {row.external_id} updated on provider but not locally"
        ) from exc

    if updated is None:
        logger.error(
            "[sync] concurrent update on assistant %s (external_id=%s); provider may not match local row",
            row.id, row.external_id,
        )
        await _record_drift(
            row.external_id, owner_id, "update", f"version {row.version} superseded before local write", fields
        )
        raise Conflict()
    return updated


async def delete_assistant(client: VapiClient, owner_id, assistant_id) -> str:
    """Delete on the provider, then locally. Returns the deleted local id."""
    row = await get_assistant(owner_id, assistant_id)
    await client.delete_assistant(row.external_id)  # UpstreamError propagates
    await registry.remove(row)
    logger.info("[sync] deleted assistant %s (external_id=%s)", row.id, row.external_id)
    return str(row.id)

"""
Assistant registry: owner-scoped access to the local shadow rows.

Every query carries an explicit `owner_id = caller` predicate. A row owned by
someone else is indistinguishable from a row that does not exist.
"""
from typing import Optional

from tortoise import timezone
from tortoise.expressions import F

from app.core.db import parse_uuid
from app.models.assistant import Assistant
from app.models.reconciliation import ReconciliationTask
from .assistant_mapping import LOCAL_TO_COLUMN, to_columns


def local_fields(row: Assistant) -> dict:
    """Local (camelCase) field view of a row."""
    return {api: getattr(row, column) for api, column in LOCAL_TO_COLUMN.items()}


async def list_for_owner(owner_id) -> list[Assistant]:
    return await Assistant.filter(owner_id=owner_id).order_by("-created_at")


async def get_for_owner(assistant_id, owner_id) -> Optional[Assistant]:
    aid = parse_uuid(assistant_id)
    if aid is None:
        return None
    return await Assistant.get_or_none(id=aid, owner_id=owner_id)


async def insert(owner_id, external_id: str, fields: dict) -> Assistant:
    return await Assistant.create(owner_id=owner_id, external_id=external_id, **to_columns(fields))


async def apply_update(row: Assistant, fields: dict) -> Optional[Assistant]:
    """
    Write `fields` only if the row still has the version it was read with.

    Returns:
        The refreshed row, or None if another update got there first
    """
    columns = to_columns(fields)
    updated = await Assistant.filter(
        id=row.id, owner_id=row.owner_id, version=row.version
    ).update(**columns, version=F("version") + 1, updated_at=timezone.now())
    if not updated:
        return None
    await row.refresh_from_db()
    return row


async def remove(row: Assistant) -> None:
    await Assistant.filter(id=row.id, owner_id=row.owner_id).delete()


async def record_reconciliation(
    external_id: str,
    owner_id,
    operation: str,
    reason: str,
    payload: dict,
    status: str = "pending",
) -> ReconciliationTask:
    return await ReconciliationTask.create(
        external_id=external_id,
        owner_id=owner_id,
        operation=operation,
        reason=reason,
        payload=payload,
        status=status,
    )

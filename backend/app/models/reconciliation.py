# app/models/reconciliation.py
import uuid
from tortoise import fields, models

class ReconciliationTask(models.Model):
    """
    A detected mismatch between the provider and the local shadow rows.

    Written when a two-phase write cannot be completed (local insert failed
    after the provider create, or a concurrent update won the race). Nothing
    in the request path reads these; they are for an operator or a sweep job.
    - status: "pending" (needs attention) / "compensated" (provider side undone)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    external_id = fields.CharField(max_length=128, index=True)
    owner_id = fields.UUIDField()
    operation = fields.CharField(max_length=16)  # create / update / delete
    reason = fields.TextField()
    payload = fields.JSONField(default=dict)  # Intended local fields
    status = fields.CharField(max_length=16, default="pending")
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "reconciliation_tasks"

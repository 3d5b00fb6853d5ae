# app/models/assistant.py
"""
Database model for voice assistants.
The provider (Vapi.ai) is the system of record; this row is the owner-scoped
shadow that listing and lookups are served from.
"""
import uuid
from tortoise import fields, models

class Assistant(models.Model):
    """
    Assistant shadow record.

    A row is only written after the provider accepted the create call, so
    external_id is always set and never changes afterwards. `version` is the
    optimistic concurrency counter bumped by every successful update.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    owner = fields.ForeignKeyField(
        "models.User",
        related_name="assistants",
        on_delete=fields.CASCADE,
    )
    external_id = fields.CharField(max_length=128, unique=True, index=True)  # Provider assistant id

    name = fields.CharField(max_length=255)
    voice_provider = fields.CharField(max_length=64)
    language_code = fields.CharField(max_length=32)
    intro_message = fields.TextField()
    webhook_url = fields.CharField(max_length=1024, null=True)
    transcription_enabled = fields.BooleanField(default=True)
    recording_enabled = fields.BooleanField(default=True)
    availability = fields.JSONField(default=dict)  # weekday -> [{"start": "09:00", "end": "17:00"}]

    version = fields.IntField(default=1)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "assistants"

"""
Assistant field mapping

Translates between the local (API / shadow row) field shape and the Vapi.ai
assistant shape:

    name                          -> name
    availability                  -> availability
    voiceProvider + languageCode  -> voice: {provider, language}
    introMessage                  -> initial_message
    webhookUrl                    -> webhook: {url}          (omitted if empty)
    transcriptionEnabled          -> transcriber: {enabled}
    recordingEnabled              -> recording_enabled
"""
from typing import Any, Optional

# Local API name -> Assistant column
LOCAL_TO_COLUMN = {
    "name": "name",
    "availability": "availability",
    "voiceProvider": "voice_provider",
    "languageCode": "language_code",
    "introMessage": "intro_message",
    "webhookUrl": "webhook_url",
    "transcriptionEnabled": "transcription_enabled",
    "recordingEnabled": "recording_enabled",
}


def to_columns(fields: dict) -> dict:
    """Rename local API fields to model column names (unknown keys dropped)."""
    return {LOCAL_TO_COLUMN[k]: v for k, v in fields.items() if k in LOCAL_TO_COLUMN}


def to_provider_payload(
    fields: dict,
    owner_id: Optional[str] = None,
    partial: bool = False,
    current: Optional[dict] = None,
) -> dict:
    """
    Build the provider request body from local fields.

    Args:
        fields: Local-shaped fields (complete on create, only the changed
            ones on update)
        owner_id: Written to metadata.businessId so the provider side records
            the tenant
        partial: Update mode. Only provided fields are emitted, and an
            explicitly cleared webhookUrl becomes `webhook: null` so the
            provider drops it too
        current: Stored local fields, used on update to complete the voice
            object when only one of voiceProvider / languageCode changed

    Returns:
        dict ready to be sent as JSON
    """
    current = current or {}
    body: dict[str, Any] = {}

    if "name" in fields:
        body["name"] = fields["name"]
    if "availability" in fields:
        body["availability"] = fields["availability"]

    if "voiceProvider" in fields or "languageCode" in fields:
        body["voice"] = {
            "provider": fields.get("voiceProvider", current.get("voiceProvider")),
            "language": fields.get("languageCode", current.get("languageCode")),
        }

    if "introMessage" in fields:
        body["initial_message"] = fields["introMessage"]

    if "webhookUrl" in fields:
        if fields["webhookUrl"]:
            body["webhook"] = {"url": fields["webhookUrl"]}
        elif partial:
            body["webhook"] = None

    if "transcriptionEnabled" in fields:
        body["transcriber"] = {"enabled": fields["transcriptionEnabled"]}
    if "recordingEnabled" in fields:
        body["recording_enabled"] = fields["recordingEnabled"]

    if owner_id is not None:
        body["metadata"] = {"businessId": owner_id}
    return body


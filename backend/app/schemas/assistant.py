# app/schemas/assistant.py
"""
Pydantic schemas for assistant endpoints.

Validation happens here, before any handler runs, so a malformed request never
reaches the provider. Field names are the local (camelCase) shape; see
app.services.assistant_mapping for the provider shape.
"""
import re
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator, model_validator

__all__ = [
    "WEEKDAYS",
    "TimeInterval",
    "AssistantCreateIn",
    "AssistantUpdateIn",
    "default_availability",
]

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Weekday = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def default_availability() -> dict:
    """Mon-Fri 09:00-17:00, closed at the weekend."""
    return {
        day: ([{"start": "09:00", "end": "17:00"}] if day not in ("saturday", "sunday") else [])
        for day in WEEKDAYS
    }


def _check_webhook(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("webhookUrl must be an http(s) URL")
    return value


class TimeInterval(BaseModel):
    """One open interval within a day, 24h HH:MM."""
    model_config = ConfigDict(extra="forbid")

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _hhmm(cls, v: str) -> str:
        if not _HHMM.match(v):
            raise ValueError("time must be HH:MM")
        return v

    @model_validator(mode="after")
    def _ordered(self):
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self


Availability = dict[Weekday, list[TimeInterval]]


class AssistantCreateIn(BaseModel):
    name: NonBlank
    voiceProvider: NonBlank
    languageCode: NonBlank
    introMessage: NonBlank
    availability: Optional[Availability] = None
    webhookUrl: Optional[str] = None
    transcriptionEnabled: bool = True
    recordingEnabled: bool = True

    @field_validator("webhookUrl")
    @classmethod
    def _webhook(cls, v: Optional[str]) -> Optional[str]:
        return _check_webhook(v)

    def to_fields(self) -> dict:
        """Local-shaped field dict with defaults applied."""
        data = self.model_dump()
        if data["availability"] is None:
            data["availability"] = default_availability()
        return data


class AssistantUpdateIn(BaseModel):
    """
    Partial update. Only fields present in the request body are applied;
    `version`, when given, must match the stored row or the update is refused.
    """
    name: Optional[NonBlank] = None
    voiceProvider: Optional[NonBlank] = None
    languageCode: Optional[NonBlank] = None
    introMessage: Optional[NonBlank] = None
    availability: Optional[Availability] = None
    webhookUrl: Optional[str] = None
    transcriptionEnabled: Optional[bool] = None
    recordingEnabled: Optional[bool] = None
    version: Optional[int] = None

    @field_validator("webhookUrl")
    @classmethod
    def _webhook(cls, v: Optional[str]) -> Optional[str]:
        return _check_webhook(v)

    @field_validator(
        "name",
        "voiceProvider",
        "languageCode",
        "introMessage",
        "availability",
        "transcriptionEnabled",
        "recordingEnabled",
        mode="before",
    )
    @classmethod
    def _not_null(cls, v):
        # Explicit null is only meaningful for webhookUrl
        if v is None:
            raise ValueError("must not be null")
        return v

    def to_fields(self) -> dict:
        """Provided fields only, without the concurrency token."""
        data = self.model_dump(exclude_unset=True)
        data.pop("version", None)
        return data

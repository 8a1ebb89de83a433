"""Pydantic models describing the party store payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class PartyStoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Envelope(PartyStoreBaseModel):
    """Wrapper every store response comes in."""

    success: bool = False
    data: object = None
    error: str | None = None
    message: str | None = None

    def failure_message(self, operation: str) -> str:
        return self.error or self.message or f"Failed to {operation}"


class PartyPayload(PartyStoreBaseModel):
    id: str
    status: str = "created"
    host_email: str = ""
    host_can_see_all: bool = False
    access_token: str | None = None
    user_id: int | None = None
    party_date: datetime | None = None
    location: str | None = None
    max_amount: float | None = None
    personal_message: str | None = None

    _normalize_optional = field_validator(
        "party_date", "location", "personal_message", mode="before"
    )(_blank_to_none)

    @field_validator("max_amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: object) -> object:
        # numeric columns arrive as strings from some drivers
        if isinstance(value, str):
            stripped = value.strip()
            return float(stripped) if stripped else None
        return value


class ParticipantPayload(PartyStoreBaseModel):
    id: int
    party_id: str | None = None
    name: str
    email: str
    is_host: bool = False
    user_id: int | None = None
    assigned_to: int | None = None
    wishlist: str | None = None
    wishlist_description: str | None = None
    access_token: str | None = None


class PersonPayload(PartyStoreBaseModel):
    id: int
    name: str = ""
    email: str = ""


class AssignmentPayload(PartyStoreBaseModel):
    """Assignment row, flat (``giver_id``) or nested (``giver: {id, ...}``)."""

    id: int
    party_id: str | None = None
    giver_id: int = Field(validation_alias=AliasChoices("giver_id", "giverId"))
    receiver_id: int = Field(validation_alias=AliasChoices("receiver_id", "receiverId"))
    giver_name: str | None = None
    giver_email: str | None = None
    receiver_name: str | None = None
    receiver_email: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_nested_people(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        data: dict[str, object] = dict(cast(Mapping[str, object], value))
        for role in ("giver", "receiver"):
            nested = data.pop(role, None)
            if not isinstance(nested, Mapping):
                continue
            person = PersonPayload.model_validate(nested)
            data.setdefault(f"{role}_id", person.id)
            data.setdefault(f"{role}_name", person.name or None)
            data.setdefault(f"{role}_email", person.email or None)
        return data


class MyAssignmentPayload(PartyStoreBaseModel):
    receiver: PersonPayload
    wishlist: str | None = None
    wishlist_description: str | None = Field(
        default=None,
        validation_alias=AliasChoices("wishlistDescription", "wishlist_description"),
    )


class AssignmentsPayload(PartyStoreBaseModel):
    generated: bool = False
    assignments: list[AssignmentPayload] = Field(default_factory=list[AssignmentPayload])
    my_assignment: MyAssignmentPayload | None = Field(
        default=None, validation_alias=AliasChoices("myAssignment", "my_assignment")
    )

    @field_validator("assignments", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class PartyDetailsPayload(PartyStoreBaseModel):
    party: PartyPayload
    participants: list[ParticipantPayload] = Field(default_factory=list[ParticipantPayload])
    assignments: list[AssignmentPayload] = Field(default_factory=list[AssignmentPayload])
    user_participant: ParticipantPayload | None = Field(
        default=None, validation_alias=AliasChoices("userParticipant", "user_participant")
    )

    @field_validator("participants", "assignments", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class ExclusionPayload(PartyStoreBaseModel):
    id: int | None = None
    party_id: str | None = None
    participant1_id: int = Field(
        validation_alias=AliasChoices("participant1_id", "participant1Id", "participant_1_id")
    )
    participant2_id: int = Field(
        validation_alias=AliasChoices("participant2_id", "participant2Id", "participant_2_id")
    )


class GenerationSummaryPayload(PartyStoreBaseModel):
    assignments_created: int | None = Field(
        default=None,
        validation_alias=AliasChoices("assignmentsCreated", "assignments_created"),
    )
    emails_sent: int | None = Field(
        default=None, validation_alias=AliasChoices("emailsSent", "emails_sent")
    )
    attempts: int | None = None
    seed: int | None = None
    locked: bool | None = None
    assignments: list[AssignmentPayload] = Field(default_factory=list[AssignmentPayload])

    @field_validator("assignments", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class UserPayload(PartyStoreBaseModel):
    id: int
    email: str
    full_name: str | None = None


class AccountPayload(PartyStoreBaseModel):
    user: UserPayload

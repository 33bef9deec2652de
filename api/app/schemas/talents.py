from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from app.schemas.common import CamelModel, ReviewStatus, coerce_text_items, scalar_as_text


class TalentCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    title: str = Field(min_length=1)
    bio: str | None = None
    location: str | None = None
    skills: list[str] = Field(default_factory=list)
    availability: str = "Available"
    rate: str | None = None
    wallet_address: str | None = None
    avatar: str | None = None

    @field_validator("name", "title", "bio", "location", "availability", "rate", mode="before")
    @classmethod
    def _number_as_text(cls, value: Any) -> Any:
        return scalar_as_text(value)

    @field_validator("skills", mode="before")
    @classmethod
    def _text_items(cls, value: Any) -> Any:
        return coerce_text_items(value)


class TalentProfile(TalentCreateRequest):
    id: str
    owner_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ownerId", "userId", "owner_id"),
    )
    name: str = ""
    title: str = ""
    status: ReviewStatus = "approved"
    company_email_verified: bool = False
    created_at: datetime | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    rejection_reason: str | None = None


class AdminTalentProfile(TalentProfile):
    owner_email: str | None = None


class TalentListOut(CamelModel):
    talents: list[TalentProfile]


class AdminTalentListOut(CamelModel):
    talents: list[AdminTalentProfile]


class TalentOut(CamelModel):
    talent: TalentProfile


class TalentMutationOut(CamelModel):
    success: bool = True
    talent: TalentProfile

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from app.schemas.common import CamelModel, ReviewStatus, coerce_text_items, scalar_as_text


class JobCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str | None = None
    base_city: str | None = None
    salary: str | None = None
    employment_type: str = Field(default="Full-time", alias="type")
    category: str = "dev"
    remote: bool = False
    tags: list[str] = Field(default_factory=list)
    requirements: str | None = None
    experience: str | None = None
    application_method: str | None = None
    has_equities: bool = False
    accepts_recruiters: bool = False
    posted_by: str | None = None
    company_logo: str | None = None
    company_website: str | None = None
    company_twitter: str | None = None
    company_tokens: list[str] = Field(default_factory=list)

    @field_validator(
        "title",
        "company",
        "description",
        "location",
        "base_city",
        "salary",
        "employment_type",
        "category",
        "requirements",
        "experience",
        "application_method",
        "posted_by",
        mode="before",
    )
    @classmethod
    def _number_as_text(cls, value: Any) -> Any:
        return scalar_as_text(value)

    @field_validator("tags", "company_tokens", mode="before")
    @classmethod
    def _text_items(cls, value: Any) -> Any:
        return coerce_text_items(value)


class JobPosting(JobCreateRequest):
    id: str
    owner_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ownerId", "userId", "owner_id"),
    )
    title: str = ""
    company: str = ""
    description: str = ""
    # Legacy rows written before moderation existed carry no status.
    status: ReviewStatus = "approved"
    company_email_verified: bool = False
    created_at: datetime | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    rejection_reason: str | None = None


class AdminJobPosting(JobPosting):
    owner_email: str | None = None


class JobListOut(CamelModel):
    jobs: list[JobPosting]


class AdminJobListOut(CamelModel):
    jobs: list[AdminJobPosting]


class JobOut(CamelModel):
    job: JobPosting


class JobMutationOut(CamelModel):
    success: bool = True
    job: JobPosting

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, Field

from app.schemas.common import EMAIL_PATTERN, CamelModel

ApplicationStatus = Literal["pending", "pass", "no"]
ApplicationStatusFilter = Literal["pending", "pass", "no", "all"]
CompanyEmailStatus = Literal["none", "pending", "pass", "no"]


class CompanyEmailApplyRequest(CamelModel):
    company_email: str = Field(min_length=3, pattern=EMAIL_PATTERN)


class CompanyEmailApplication(CamelModel):
    id: str
    owner_id: str = Field(validation_alias=AliasChoices("ownerId", "userId", "owner_id"))
    owner_email: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ownerEmail", "userEmail", "owner_email"),
    )
    company_email: str
    status: ApplicationStatus = "pending"
    created_at: datetime | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    rejection_reason: str | None = None


class ApplicationListOut(CamelModel):
    applications: list[CompanyEmailApplication]


class ApplicationMutationOut(CamelModel):
    success: bool = True
    application: CompanyEmailApplication

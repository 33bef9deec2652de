from pydantic import Field

from app.schemas.common import EMAIL_PATTERN, CamelModel


class AdminEmailRequest(CamelModel):
    email: str = Field(min_length=3, pattern=EMAIL_PATTERN)


class AdminEmailsOut(CamelModel):
    admin_emails: list[str]


class AdminEmailsMutationOut(CamelModel):
    success: bool = True
    admin_emails: list[str]

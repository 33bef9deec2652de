from app.schemas.common import CamelModel
from app.schemas.company_emails import CompanyEmailStatus


class UserSettings(CamelModel):
    id: str
    email: str | None = None
    name: str | None = None
    avatar: str | None = None
    company_email: str | None = None
    company_email_verified: bool = False
    company_email_status: CompanyEmailStatus = "none"


class SettingsOut(CamelModel):
    user: UserSettings


class SettingsUpdateRequest(CamelModel):
    name: str | None = None
    avatar: str | None = None


class SettingsMutationOut(CamelModel):
    success: bool = True
    user: UserSettings

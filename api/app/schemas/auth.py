from pydantic import Field

from app.schemas.common import EMAIL_PATTERN, CamelModel


class SignupRequest(CamelModel):
    email: str = Field(min_length=3, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    name: str | None = None


class SignupUserOut(CamelModel):
    id: str
    email: str | None = None


class SignupOut(CamelModel):
    success: bool = True
    user: SignupUserOut

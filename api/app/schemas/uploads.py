from app.schemas.common import CamelModel


class UploadOut(CamelModel):
    url: str

import logging
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

ReviewStatus = Literal["pending", "approved", "rejected"]
ReviewStatusFilter = Literal["pending", "approved", "rejected", "all"]
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Records and payloads travel as camelCase JSON, matching what the store holds."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class RejectRequest(CamelModel):
    rejection_reason: str | None = None


def scalar_as_text(value: Any) -> Any:
    # Older rows stored client JSON verbatim, so free-text fields may hold numbers.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def coerce_text_items(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, list):
        return [scalar_as_text(item) for item in value if item is not None]
    return value


def validate_rows(model: type[ModelT], rows: list[dict[str, Any]]) -> list[ModelT]:
    """Validate stored rows for a listing, skipping any that no longer fit the model."""
    valid: list[ModelT] = []
    for row in rows:
        try:
            valid.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning(
                "skipping malformed record model=%s id=%s errors=%d",
                model.__name__,
                row.get("id"),
                exc.error_count(),
            )
    return valid

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class Principal:
    subject: str
    scopes: set[str]
    role: str = "user"
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    def require_scopes(self, required: set[str]) -> None:
        missing = required - self.scopes
        if missing:
            raise PermissionError(f"missing required scopes: {sorted(missing)}")

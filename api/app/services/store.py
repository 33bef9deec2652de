import copy
from typing import Any, Protocol


class RecordStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def get_by_prefix(self, prefix: str) -> list[Any]: ...


class InMemoryRecordStore:
    """Process-local stand-in for the record table, used for local runs and tests."""

    def __init__(self, records: dict[str, Any] | None = None) -> None:
        self.records: dict[str, Any] = copy.deepcopy(records) if records else {}

    async def close(self) -> None:
        return None

    async def ping(self) -> None:
        return None

    async def get(self, key: str) -> Any | None:
        value = self.records.get(key)
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any) -> None:
        self.records[key] = copy.deepcopy(value)

    async def get_by_prefix(self, prefix: str) -> list[Any]:
        return [copy.deepcopy(self.records[key]) for key in sorted(self.records) if key.startswith(prefix)]

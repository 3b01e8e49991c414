"""
Backup Document Model

The single JSON artifact produced by export and consumed by import.

DESIGN DECISION: Collections are carried as raw JSON values, exactly
as they sit in storage. Export never re-serializes records through the
entity models, so an export/import round trip is byte-for-byte faithful
(legacy records lacking `expenseType` stay that way).
"""

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BackupDocument(BaseModel):
    """
    A full snapshot of every collection.

    Field order is the on-disk key order of the document.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    version: int
    export_date: str
    app_name: str
    expenses: list[Any] = Field(default_factory=list)
    profile: Optional[dict[str, Any]] = None
    savings_goals: list[Any] = Field(default_factory=list)
    saved_cards: list[Any] = Field(default_factory=list)
    activity_log: list[Any] = Field(default_factory=list)
    budget_history: list[Any] = Field(default_factory=list)
    shopping_list: list[Any] = Field(default_factory=list)
    loans: list[Any] = Field(default_factory=list)
    fixed_expenses: list[Any] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

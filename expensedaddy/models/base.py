"""
Shared model plumbing.

Every record is stored as camelCase JSON (the on-disk and backup
format), while Python code uses snake_case attributes. The alias
generator bridges the two.
"""

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """
    Millisecond timestamp followed by a 9-character random suffix.
    
    Uniqueness is probabilistic; collisions need two ids in the same
    millisecond with the same 36**9 suffix.
    """
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{int(time.time() * 1000)}{suffix}"


def utc_now_iso() -> str:
    """Current UTC time as `YYYY-MM-DDTHH:MM:SS.mmmZ`."""
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StoredModel(BaseModel):
    """
    Base for persisted records.
    
    Records are frozen: a change produces a new instance through
    `apply_patch`, never an in-place mutation. Unknown keys found in
    storage are ignored on load.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )
    
    def to_storage(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape kept on disk."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InputModel(BaseModel):
    """
    Base for creation inputs.
    
    Server-assigned fields (id, createdAt, isPaid...) sent by a caller
    are dropped rather than trusted.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


R = TypeVar("R", bound=StoredModel)


class PatchModel(BaseModel):
    """
    Base for partial updates.
    
    Only fields explicitly set by the caller are merged. Unknown
    fields are rejected instead of being silently carried along.
    
    An explicit None means "leave unchanged", except for the fields
    named in `clearable`, which are optional on the stored record and
    are cleared by None.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )
    
    clearable: ClassVar[frozenset[str]] = frozenset()
    
    def changes(self) -> dict[str, Any]:
        """The explicitly provided fields, keyed by attribute name."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None or name in self.clearable
        }
    
    @property
    def is_empty(self) -> bool:
        return not self.changes()


def apply_patch(record: R, patch: PatchModel) -> R:
    """Shallow-merge the patch's set fields over the record."""
    return record.model_copy(update=patch.changes())

"""
Row-level change events delivered by a change feed
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """One insert/update/delete notification for a single row of ``table``.

    ``new`` is the row after the change (absent for deletes), ``old`` the row
    before it. Backends differ in how much of ``old`` they deliver: Firestore
    gives nothing for updates, some feeds give only the id for deletes.
    """

    table: str
    type: ChangeType
    new: Optional[Dict[str, Any]] = None
    old: Optional[Dict[str, Any]] = None

    @property
    def record(self) -> Dict[str, Any]:
        if self.new is not None:
            return self.new
        return self.old or {}

    @property
    def record_id(self) -> Any:
        return self.record.get("id")

    def matches(self, column: str, value: Any) -> bool:
        """False only when the payload carries ``column`` with another value"""
        record = self.record
        if column not in record:
            return True
        return record[column] == value

    def to_message(self) -> Dict[str, Any]:
        return {"type": self.type.value, "table": self.table, "id": self.record_id}

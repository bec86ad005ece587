"""
Bounded undo/redo history over snapshots of the editable world state.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from annotator_core.config import Config
from annotator_core.logging import get_logger

logger = get_logger(__name__)


class Record(BaseModel):
    """Snapshot of the world data and the name of the tool that produced it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any
    actor: str


class History:
    """
    Sequence of records with a cursor pointing at the record of the current state.

    Undo and redo hand the caller's live state back into the slot they leave so
    that a following redo or undo returns it again.
    """

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = Config.HISTORY_CAPACITY if capacity is None else capacity
        if self.capacity < 1:
            raise ValueError(f"history capacity must be positive, got {self.capacity}")
        self._records: List[Record] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._records)

    @property
    def cursor(self) -> int:
        return self._cursor

    def push(self, record: Record):
        """Append a record after the cursor, dropping everything that could be redone."""
        del self._records[self._cursor + 1:]
        self._records.append(record)
        if len(self._records) > self.capacity:
            self._records.pop(0)
        self._cursor = len(self._records) - 1
        logger.debug(f"history push by {record.actor}, {len(self._records)} records")

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._records) - 1

    def undo(self, current: Record) -> Record:
        """Previous state, or ``current`` if there is nothing to undo."""
        if not self.can_undo():
            return current
        self._records[self._cursor] = current
        self._cursor -= 1
        return self._records[self._cursor].model_copy(deep=True)

    def redo(self, current: Record) -> Record:
        """Next state, or ``current`` if there is nothing to redo."""
        if not self.can_redo():
            return current
        self._records[self._cursor] = current
        self._cursor += 1
        return self._records[self._cursor].model_copy(deep=True)

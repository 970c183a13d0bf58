"""
Write-group accumulator over Firestore batched writes.

Firestore rejects a batch holding more than 500 operations, so operations are
queued on the current batch and committed synchronously whenever the pending
count reaches the limit. flush() commits whatever is left.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

MAX_WRITE_GROUP_SIZE = 500


@dataclass(frozen=True)
class DeleteOp:
    ref: Any


@dataclass(frozen=True)
class UpdateOp:
    ref: Any
    fields: Dict[str, Any] = field(default_factory=dict)


WriteOp = Union[DeleteOp, UpdateOp]


class WriteGroup:
    def __init__(self, db, label: str, uid: str, limit: int = MAX_WRITE_GROUP_SIZE):
        if not 1 <= limit <= MAX_WRITE_GROUP_SIZE:
            raise ValueError(f"Write group limit must be between 1 and {MAX_WRITE_GROUP_SIZE}, got {limit}")
        self.db = db
        self.label = label
        self.uid = uid
        self.limit = limit
        self.commits = 0
        self.written = 0
        self._batch = db.batch()
        self._pending = 0

    @property
    def pending(self) -> int:
        return self._pending

    def add(self, op: WriteOp) -> None:
        if isinstance(op, DeleteOp):
            self._batch.delete(op.ref)
        elif isinstance(op, UpdateOp):
            self._batch.update(op.ref, op.fields)
        else:
            raise TypeError(f"Unsupported write operation: {op!r}")
        self._pending += 1
        if self._pending >= self.limit:
            self._commit()

    def flush(self) -> None:
        if self._pending:
            self._commit()

    def _commit(self) -> None:
        count = self._pending
        self._batch.commit()
        self.commits += 1
        self.written += count
        logger.info("[%s] Batch committed uid=%s count=%d", self.label, self.uid, count)
        self._batch = self.db.batch()
        self._pending = 0

"""
In-memory stand-ins for Firestore, Cloud Storage and Firebase Auth.

Only the surface the account deletion code touches is modelled. Documents
are stored flat by full path, e.g. "groups/g1/members/u1".
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from firebase_admin import auth
from google.api_core.exceptions import NotFound
from google.cloud import firestore


# ---------------------------------------------------------------------------
# Firestore
# ---------------------------------------------------------------------------

class FakeSnapshot:
    def __init__(self, ref: "FakeDocumentRef", data: Dict[str, Any]):
        self.reference = ref
        self.id = ref.id
        self._data = dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)


class FakeDocumentRef:
    def __init__(self, db: "FakeFirestore", path: str):
        self._db = db
        self.path = path
        self.id = path.rsplit("/", 1)[-1]

    def collection(self, name: str) -> "FakeCollection":
        return FakeCollection(self._db, f"{self.path}/{name}")

    def get(self) -> Optional[Dict[str, Any]]:
        return self._db.docs.get(self.path)


class FakeQuery:
    def __init__(self, collection: "FakeCollection", filters: List):
        self._collection = collection
        self._filters = filters

    def where(self, filter=None) -> "FakeQuery":
        return FakeQuery(self._collection, self._filters + [filter])

    def stream(self) -> Iterator[FakeSnapshot]:
        self._collection._db.reads += 1
        self._collection._db.maybe_fail_read(self._collection.path)
        for snapshot in list(self._collection._snapshots()):
            data = snapshot.to_dict()
            if all(_matches(data, f) for f in self._filters):
                yield snapshot


def _matches(data: Dict[str, Any], field_filter) -> bool:
    if field_filter.op_string != "==":
        raise NotImplementedError(field_filter.op_string)
    return data.get(field_filter.field_path) == field_filter.value


class FakeCollection:
    def __init__(self, db: "FakeFirestore", path: str):
        self._db = db
        self.path = path

    def document(self, doc_id: str) -> FakeDocumentRef:
        return FakeDocumentRef(self._db, f"{self.path}/{doc_id}")

    def where(self, filter=None) -> FakeQuery:
        return FakeQuery(self, [filter])

    def stream(self) -> Iterator[FakeSnapshot]:
        return FakeQuery(self, []).stream()

    def _snapshots(self) -> Iterator[FakeSnapshot]:
        depth = self.path.count("/") + 1
        for path, data in sorted(self._db.docs.items()):
            if path.startswith(self.path + "/") and path.count("/") == depth:
                yield FakeSnapshot(FakeDocumentRef(self._db, path), data)


class FakeBatch:
    def __init__(self, db: "FakeFirestore"):
        self._db = db
        self.ops: List[tuple] = []
        self.committed = False

    def delete(self, ref: FakeDocumentRef) -> None:
        self.ops.append(("delete", ref.path, None))

    def update(self, ref: FakeDocumentRef, fields: Dict[str, Any]) -> None:
        self.ops.append(("update", ref.path, dict(fields)))

    def commit(self) -> None:
        if self.committed:
            raise RuntimeError("batch already committed")
        self._db.maybe_fail_commit(self)
        # Firestore applies a batch atomically: validate first, then write
        for kind, path, _ in self.ops:
            if kind == "update" and path not in self._db.docs:
                raise NotFound(f"No document to update: {path}")
        for kind, path, fields in self.ops:
            if kind == "delete":
                self._db.docs.pop(path, None)
            else:
                resolved = {
                    k: (datetime.now(timezone.utc) if v is firestore.SERVER_TIMESTAMP else v)
                    for k, v in fields.items()
                }
                self._db.docs[path].update(resolved)
        self.committed = True
        self._db.commits.append(len(self.ops))


class FakeFirestore:
    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.commits: List[int] = []
        self.reads = 0
        self.fail_on_commit: Optional[int] = None  # 1-based index of the commit that raises
        self.fail_read_of: Optional[str] = None
        self.batches: List[FakeBatch] = []

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def batch(self) -> FakeBatch:
        batch = FakeBatch(self)
        self.batches.append(batch)
        return batch

    def maybe_fail_commit(self, batch: FakeBatch) -> None:
        if self.fail_on_commit is not None and len(self.commits) + 1 == self.fail_on_commit:
            self.fail_on_commit = None
            raise RuntimeError("Deadline exceeded")

    def maybe_fail_read(self, path: str) -> None:
        if self.fail_read_of is not None and path == self.fail_read_of:
            raise RuntimeError(f"Read failed: {path}")

    @property
    def writes(self) -> int:
        return sum(self.commits)

    # Seeding helpers

    def put(self, path: str, **data) -> None:
        self.docs[path] = dict(data)

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        return self.docs.get(path)


# ---------------------------------------------------------------------------
# Cloud Storage
# ---------------------------------------------------------------------------

class FakeBlob:
    def __init__(self, bucket: "FakeBucket", name: str):
        self._bucket = bucket
        self.name = name

    def delete(self) -> None:
        if self._bucket.fail_with is not None:
            raise self._bucket.fail_with
        if self.name not in self._bucket.objects:
            raise NotFound(f"No such object: {self.name}")
        del self._bucket.objects[self.name]
        self._bucket.deleted.append(self.name)


class FakeBucket:
    def __init__(self, objects: Optional[Dict[str, bytes]] = None):
        self.objects: Dict[str, bytes] = dict(objects or {})
        self.deleted: List[str] = []
        self.fail_with: Optional[Exception] = None

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)

    def list_blobs(self, prefix: str = "") -> List[FakeBlob]:
        if self.fail_with is not None:
            raise self.fail_with
        return [FakeBlob(self, name) for name in sorted(self.objects) if name.startswith(prefix)]


# ---------------------------------------------------------------------------
# Firebase Auth
# ---------------------------------------------------------------------------

class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, Dict[str, Any]] = {}
        self.users: set = set()
        self.fail_delete: Optional[Exception] = None
        self.deleted: List[str] = []

    def add_user(self, uid: str, token: Optional[str] = None) -> str:
        self.users.add(uid)
        token = token or f"token-{uid}"
        self.tokens[token] = {"uid": uid, "sub": uid, "email": f"{uid}@example.com"}
        return token

    def verify_id_token(self, token: str) -> Dict[str, Any]:
        if token not in self.tokens:
            raise auth.InvalidIdTokenError("Could not verify token signature.")
        return self.tokens[token]

    def delete_user(self, uid: str) -> None:
        if self.fail_delete is not None:
            raise self.fail_delete
        if uid not in self.users:
            raise auth.UserNotFoundError(f"No user record found for the given identifier ({uid}).")
        self.users.discard(uid)
        self.deleted.append(uid)

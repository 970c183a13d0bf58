"""
Shared fixtures: fake Firebase collaborators seeded with a small expense-splitting world.

Run from the repo root: pytest -v
"""
from __future__ import annotations

import pytest

from functions.database.firebase_client import FirebaseClients
from functions.modules.accounts.record_purger import RecordPurger
from functions.modules.accounts.service import AccountEraser
from functions.modules.accounts.storage import FileEraser
from functions.modules.auth.service import AuthService
from tests.fakes import FakeAuth, FakeBucket, FakeFirestore

UID = "alice"
OTHER = "bob"


@pytest.fixture
def db() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def bucket() -> FakeBucket:
    return FakeBucket()


@pytest.fixture
def fake_auth() -> FakeAuth:
    fa = FakeAuth()
    fa.add_user(UID)
    fa.add_user(OTHER)
    return fa


@pytest.fixture
def clients(db, bucket, fake_auth) -> FirebaseClients:
    return FirebaseClients(db=db, bucket=bucket, auth=fake_auth)


@pytest.fixture
def eraser(db, bucket, fake_auth) -> AccountEraser:
    return AccountEraser(
        purger=RecordPurger(db),
        file_eraser=FileEraser(bucket),
        auth_service=AuthService(fake_auth),
    )


@pytest.fixture
def seeded(db, bucket) -> FakeFirestore:
    """
    alice owns g1 (shared with bob) and belongs to g2.
    Expenses e1/e2 are paid by alice, e3 by bob.
    Settlements: s1 alice->bob, s2 bob->alice, s3 bob->carol.
    """
    db.put(f"users/{UID}", name="Alice", email="alice@example.com", phone="+91 90000 00000")
    db.put(f"users/{OTHER}", name="Bob")

    db.put("groups/g1", name="Goa trip", owner_id=UID)
    db.put("groups/g2", name="Flat", owner_id=OTHER)
    db.put(f"groups/g1/members/{UID}", role="owner")
    db.put(f"groups/g1/members/{OTHER}", role="member")
    db.put(f"groups/g2/members/{UID}", role="member")
    db.put(f"groups/g2/members/{OTHER}", role="owner")
    db.put(f"userGroups/{UID}/groups/g1", name="Goa trip")
    db.put(f"userGroups/{UID}/groups/g2", name="Flat")
    db.put(f"userGroups/{OTHER}/groups/g1", name="Goa trip")

    db.put(f"userFriends/{UID}/friends/{OTHER}", since="2024-01-01")
    db.put(f"userFriends/{OTHER}/friends/{UID}", since="2024-01-01")

    db.put("expenses/e1", payer_id=UID, group_id="g1", description="Dinner at Alice's", amount=1200, is_deleted=False)
    db.put("expenses/e2", payer_id=UID, group_id="g2", description="Rent", amount=30000, is_deleted=False)
    db.put("expenses/e3", payer_id=OTHER, group_id="g1", description="Fuel", amount=800, is_deleted=False)

    db.put("settlements/s1", payer_id=UID, receiver_id=OTHER, amount=400, is_deleted=False)
    db.put("settlements/s2", payer_id=OTHER, receiver_id=UID, amount=150, is_deleted=False)
    db.put("settlements/s3", payer_id=OTHER, receiver_id="carol", amount=90, is_deleted=False)

    bucket.objects[f"users/{UID}/avatar.jpg"] = b"jpg"
    bucket.objects[f"users/{UID}/receipts/r1.png"] = b"png"
    bucket.objects[f"users/{OTHER}/avatar.jpg"] = b"jpg"
    return db

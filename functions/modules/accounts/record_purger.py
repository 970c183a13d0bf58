"""
Firestore side of account deletion.

Owned documents (profile, group index, friend index, group membership
entries) are deleted. Expenses and settlements are soft-deleted so the groups
they belong to keep their history for the remaining members.
"""
import logging
from dataclasses import dataclass
from itertools import chain
from typing import Iterable, List

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from functions.config import settings
from functions.core.write_group import DeleteOp, UpdateOp, WriteGroup
from functions.modules.accounts import models

logger = logging.getLogger(__name__)

TAG = "DeleteAccount.Firestore"


@dataclass
class PurgeSummary:
    profile: int = 0
    group_index: int = 0
    friend_index: int = 0
    group_members: int = 0
    expenses: int = 0
    settlements: int = 0
    commits: int = 0

    @property
    def total(self) -> int:
        return (
            self.profile + self.group_index + self.friend_index
            + self.group_members + self.expenses + self.settlements
        )


class RecordPurger:
    def __init__(self, db, write_group_limit: int = None, deleted_placeholder: str = None):
        self.db = db
        self.write_group_limit = settings.write_group_limit if write_group_limit is None else write_group_limit
        self.deleted_placeholder = settings.deleted_placeholder if deleted_placeholder is None else deleted_placeholder

    def purge(self, uid: str) -> PurgeSummary:
        """Delete or anonymize every record referencing uid. Store errors propagate."""
        logger.info("[%s] Deleting Firestore data uid=%s", TAG, uid)
        summary = PurgeSummary()

        # Member entries are only reachable through the membership index, so they
        # are removed before the index itself; a retry after a failed commit
        # still finds every group.
        memberships = list(self._user_groups(uid).stream())

        self._delete_profile(uid, summary)
        self._remove_from_groups(uid, [doc.id for doc in memberships], summary)
        self._delete_group_index(uid, memberships, summary)
        self._delete_friend_index(uid, summary)
        self._soft_delete_expenses(uid, summary)
        self._soft_delete_settlements(uid, summary)

        logger.info(
            "[%s] Firestore data deletion completed uid=%s records=%d commits=%d",
            TAG, uid, summary.total, summary.commits
        )
        return summary

    def _write_group(self, label: str, uid: str) -> WriteGroup:
        return WriteGroup(self.db, label=label, uid=uid, limit=self.write_group_limit)

    def _user_groups(self, uid: str):
        return self.db.collection(models.USER_GROUPS).document(uid).collection(models.USER_GROUPS_SUB)

    def _run(self, label: str, uid: str, ops: Iterable) -> WriteGroup:
        group = self._write_group(label, uid)
        for op in ops:
            group.add(op)
        group.flush()
        return group

    def _delete_profile(self, uid: str, summary: PurgeSummary) -> None:
        # Queued unconditionally; deleting an absent document is a no-op in Firestore
        ref = self.db.collection(models.USERS).document(uid)
        group = self._run(f"{TAG}.Profile", uid, [DeleteOp(ref)])
        summary.profile = group.written
        summary.commits += group.commits
        logger.info("[%s] User document deleted uid=%s", TAG, uid)

    def _delete_group_index(self, uid: str, memberships: List, summary: PurgeSummary) -> None:
        group = self._run(f"{TAG}.UserGroups", uid, (DeleteOp(doc.reference) for doc in memberships))
        summary.group_index = group.written
        summary.commits += group.commits
        logger.info("[%s] userGroups deleted uid=%s count=%d", TAG, uid, group.written)

    def _delete_friend_index(self, uid: str, summary: PurgeSummary) -> None:
        friends = self.db.collection(models.USER_FRIENDS).document(uid)\
            .collection(models.USER_FRIENDS_SUB)\
            .stream()
        group = self._run(f"{TAG}.UserFriends", uid, (DeleteOp(doc.reference) for doc in friends))
        summary.friend_index = group.written
        summary.commits += group.commits
        logger.info("[%s] userFriends deleted uid=%s count=%d", TAG, uid, group.written)

    def _remove_from_groups(self, uid: str, group_ids: List[str], summary: PurgeSummary) -> None:
        # Only the membership entry goes; the group document stays even when uid owned it
        ops = (
            DeleteOp(
                self.db.collection(models.GROUPS).document(group_id)
                .collection(models.GROUP_MEMBERS_SUB).document(uid)
            )
            for group_id in group_ids
        )
        group = self._run(f"{TAG}.Groups", uid, ops)
        summary.group_members = group.written
        summary.commits += group.commits
        logger.info("[%s] User removed from groups uid=%s count=%d", TAG, uid, group.written)

    def _soft_delete_expenses(self, uid: str, summary: PurgeSummary) -> None:
        expenses = self.db.collection(models.EXPENSES)\
            .where(filter=FieldFilter("payer_id", "==", uid))\
            .stream()
        ops = (
            UpdateOp(doc.reference, {
                "is_deleted": True,
                "deleted_at": firestore.SERVER_TIMESTAMP,
                "description": self.deleted_placeholder,
            })
            for doc in expenses
            if not self._expense_redacted(doc)
        )
        group = self._run(f"{TAG}.Expenses", uid, ops)
        summary.expenses = group.written
        summary.commits += group.commits
        logger.info("[%s] Expenses soft-deleted uid=%s count=%d", TAG, uid, group.written)

    def _soft_delete_settlements(self, uid: str, summary: PurgeSummary) -> None:
        settlements = self.db.collection(models.SETTLEMENTS)
        as_payer = settlements.where(filter=FieldFilter("payer_id", "==", uid)).stream()
        as_receiver = settlements.where(filter=FieldFilter("receiver_id", "==", uid)).stream()

        # A settlement with uid on both sides shows up in both queries
        seen = set()
        group = self._write_group(f"{TAG}.Settlements", uid)
        for doc in chain(as_payer, as_receiver):
            if doc.id in seen or (doc.to_dict() or {}).get("is_deleted") is True:
                continue
            seen.add(doc.id)
            group.add(UpdateOp(doc.reference, {
                "is_deleted": True,
                "deleted_at": firestore.SERVER_TIMESTAMP,
            }))
        group.flush()
        summary.settlements = group.written
        summary.commits += group.commits
        logger.info("[%s] Settlements soft-deleted uid=%s count=%d", TAG, uid, group.written)

    def _expense_redacted(self, doc) -> bool:
        data = doc.to_dict() or {}
        return data.get("is_deleted") is True and data.get("description") == self.deleted_placeholder

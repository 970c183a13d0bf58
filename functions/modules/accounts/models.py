# Firestore collections touched by account deletion
# This file documents the expected document layout
# Actual operations are handled via the Firestore SDK in record_purger.py
# Authentication is handled by Firebase Auth (identity records keyed by uid)

"""
Expected Firestore structure:

users/{uid}:
- profile document (name, email, phone, avatar_url, ...) - deleted on erasure

userGroups/{uid}/groups/{groupId}:
- one document per group the user belongs to - deleted on erasure

userFriends/{uid}/friends/{friendId}:
- one document per friend relation - deleted on erasure

groups/{groupId}:
- group document - never deleted, even when the erased user owned it
groups/{groupId}/members/{uid}:
- membership entry - deleted on erasure

expenses/{expenseId}:
- payer_id: string (uid)
- description: string - overwritten with "[Deleted]" on erasure
- is_deleted: bool
- deleted_at: timestamp (server time)
- expenses are soft-deleted only; groups keep their history

settlements/{settlementId}:
- payer_id: string (uid)
- receiver_id: string (uid)
- is_deleted: bool
- deleted_at: timestamp (server time)
- soft-deleted when either party is the erased user

Cloud Storage:
- users/{uid}/avatar.jpg plus any other objects under users/{uid}/
"""

USERS = "users"
USER_GROUPS = "userGroups"
USER_GROUPS_SUB = "groups"
USER_FRIENDS = "userFriends"
USER_FRIENDS_SUB = "friends"
GROUPS = "groups"
GROUP_MEMBERS_SUB = "members"
EXPENSES = "expenses"
SETTLEMENTS = "settlements"


def user_storage_prefix(uid: str) -> str:
    return f"{USERS}/{uid}/"

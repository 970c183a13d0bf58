"""Cloud Storage cleanup for a deleted account. Best-effort: never fails the request."""
import logging

from google.api_core.exceptions import NotFound

from functions.config import settings
from functions.core.errors import StorageWarning
from functions.core.outcomes import FailurePolicy, StepOutcome
from functions.modules.accounts import models

logger = logging.getLogger(__name__)

TAG = "DeleteAccount.Storage"


class FileEraser:
    def __init__(self, bucket, avatar_filename: str = None):
        self._bucket = bucket
        self.avatar_filename = settings.avatar_filename if avatar_filename is None else avatar_filename

    def avatar_path(self, uid: str) -> str:
        return f"{models.user_storage_prefix(uid)}{self.avatar_filename}"

    def delete_file(self, key: str) -> bool:
        """Delete one object. Returns False when it was already gone."""
        try:
            self._bucket.blob(key).delete()
            return True
        except NotFound:
            return False

    def erase(self, uid: str) -> StepOutcome:
        """Delete the avatar and everything under users/{uid}/."""
        try:
            self.delete_file(self.avatar_path(uid))
            logger.info("[%s] Avatar deleted uid=%s", TAG, uid)

            deleted = 0
            for blob in self._bucket.list_blobs(prefix=models.user_storage_prefix(uid)):
                if self.delete_file(blob.name):
                    deleted += 1
            logger.info("[%s] Storage files deleted uid=%s count=%d", TAG, uid, deleted)
            return StepOutcome.succeeded("storage", FailurePolicy.ADVISORY, deleted)
        except Exception as e:
            logger.warning("[%s] Failed to delete storage files uid=%s: %s", TAG, uid, e)
            return StepOutcome.failed("storage", FailurePolicy.ADVISORY, StorageWarning(str(e)))

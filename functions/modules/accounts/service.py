"""
Account deletion workflow.

START -> RecordPurger -> FileEraser (advisory) -> IdentityEraser -> SUCCESS

The identity record goes last so that any earlier failure leaves the account
able to sign in and retry; every step is idempotent.
"""
import logging
from typing import Callable

from functions.core.errors import CallableError, Internal
from functions.core.outcomes import ErasureReport, FailurePolicy, StepOutcome
from functions.modules.accounts.record_purger import RecordPurger
from functions.modules.accounts.schemas import DeleteAccountResponse
from functions.modules.accounts.storage import FileEraser
from functions.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

TAG = "DeleteAccount"


class AccountEraser:
    def __init__(self, purger: RecordPurger, file_eraser: FileEraser, auth_service: AuthService):
        self.purger = purger
        self.file_eraser = file_eraser
        self.auth_service = auth_service

    def erase(self, uid: str) -> DeleteAccountResponse:
        logger.info("[%s] Account deletion requested uid=%s", TAG, uid)
        report = ErasureReport(uid=uid)

        self._check(report, self._run_fatal("records", self.purger.purge, uid))
        self._check(report, self.file_eraser.erase(uid))
        self._check(report, self._run_fatal("identity", self.auth_service.delete_identity, uid))

        logger.info(
            "[%s] Account deletion completed successfully uid=%s warnings=%d",
            TAG, uid, len(report.warnings)
        )
        return DeleteAccountResponse(success=True, message="Account deleted successfully")

    @staticmethod
    def _run_fatal(step: str, action: Callable, uid: str) -> StepOutcome:
        try:
            return StepOutcome.succeeded(step, FailurePolicy.FATAL, action(uid))
        except Exception as e:
            return StepOutcome.failed(step, FailurePolicy.FATAL, e)

    def _check(self, report: ErasureReport, outcome: StepOutcome) -> None:
        report.record(outcome)
        if outcome.is_warning:
            logger.warning("[%s] Step %s failed (ignored) uid=%s: %s", TAG, outcome.step, report.uid, outcome.error)
            return
        if not outcome.is_fatal:
            return
        error = outcome.error
        logger.error("[%s] Account deletion failed at %s uid=%s error=%s", TAG, outcome.step, report.uid, error)
        if isinstance(error, CallableError):
            raise error
        raise Internal(
            "Failed to delete account. Please try again.",
            details={"error": str(error)},
        ) from error

"""
Errors surfaced through the callable protocol.

Only CallableError subclasses reach the caller; StorageWarning is recorded on
advisory step outcomes and logged, never raised out of a request.
"""
from typing import Any, Dict, Optional


class CallableError(Exception):
    """Base for errors returned as {"error": {"status", "message", "details"}}."""
    status: str = "INTERNAL"
    http_status: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"status": self.status, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}


class Unauthenticated(CallableError):
    """No verified caller identity; retrying needs new credentials."""
    status = "UNAUTHENTICATED"
    http_status = 401


class Internal(CallableError):
    """Store or identity service failure; safe to retry since every step is idempotent."""
    status = "INTERNAL"
    http_status = 500


class StorageWarning(Exception):
    """File cleanup failed; logged only."""
    pass

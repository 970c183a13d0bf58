import logging
from typing import Optional

from firebase_admin import app_check, auth
from jwt import PyJWKClientError

from functions.config.settings import settings
from functions.core.errors import Unauthenticated
from functions.modules.auth.schemas import CallerIdentity

logger = logging.getLogger(__name__)

TAG = "DeleteAccount.Auth"


class AuthService:
    def __init__(self, auth_client, firebase_app=None):
        self.auth_client = auth_client
        self.firebase_app = firebase_app

    def verify_caller(self, token: Optional[str]) -> CallerIdentity:
        """Resolve the caller from a Firebase ID token; nothing is read or written before this passes."""
        if not token or not token.strip():
            logger.error("[%s] Unauthenticated request", TAG)
            raise Unauthenticated("User must be authenticated to delete account")
        try:
            claims = self.auth_client.verify_id_token(token)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError,
                auth.RevokedIdTokenError, auth.CertificateFetchError) as e:
            logger.error("[%s] Unauthenticated request: %s", TAG, e)
            raise Unauthenticated("User must be authenticated to delete account")
        uid = claims.get("uid") or claims.get("sub")
        if not uid:
            logger.error("[%s] Unauthenticated request: token carries no uid", TAG)
            raise Unauthenticated("User must be authenticated to delete account")
        return CallerIdentity(uid=uid, email=claims.get("email"))

    def verify_app_check(self, token: Optional[str]) -> None:
        """Only enforced when enforce_app_check is enabled."""
        if not settings.enforce_app_check:
            return
        if not token:
            logger.error("[%s] Missing App Check token", TAG)
            raise Unauthenticated("App Check token required")
        try:
            app_check.verify_token(token, app=self.firebase_app)
        except (ValueError, PyJWKClientError) as e:
            logger.error("[%s] Invalid App Check token: %s", TAG, e)
            raise Unauthenticated("Invalid App Check token")

    def delete_identity(self, uid: str) -> bool:
        """Delete the Firebase Auth account. Returns False when an earlier attempt already removed it."""
        try:
            self.auth_client.delete_user(uid)
        except auth.UserNotFoundError:
            logger.info("[%s] Firebase Auth account already absent uid=%s", TAG, uid)
            return False
        logger.info("[%s] Firebase Auth account deleted uid=%s", TAG, uid)
        return True

"""
Core dependencies for the callable endpoints
"""

from fastapi import Depends, Header, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from functions.database.firebase_client import FirebaseClients, get_firebase
from functions.modules.auth.schemas import CallerIdentity
from functions.modules.auth.service import AuthService
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# Missing credentials are reported as UNAUTHENTICATED by AuthService, not by FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_auth_service(firebase: FirebaseClients = Depends(get_firebase)) -> AuthService:
    return AuthService(firebase.auth, firebase.app)


def get_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    app_check_token: Optional[str] = Header(None, alias="X-Firebase-AppCheck"),
    auth_service: AuthService = Depends(get_auth_service)
) -> CallerIdentity:
    """Verified caller identity from the Firebase ID token; the uid is the only account ever erased."""
    token = credentials.credentials if credentials else None
    caller = auth_service.verify_caller(token)
    auth_service.verify_app_check(app_check_token)
    return caller

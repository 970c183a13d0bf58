from fastapi import APIRouter, Depends, Request
from functions.config import settings
from functions.core.dependencies import get_auth_service, get_caller
from functions.core.limiter import limiter
from functions.database.firebase_client import FirebaseClients, get_firebase
from functions.modules.accounts.record_purger import RecordPurger
from functions.modules.accounts.schemas import DeleteAccountResult
from functions.modules.accounts.service import AccountEraser
from functions.modules.accounts.storage import FileEraser
from functions.modules.auth.schemas import CallerIdentity
from functions.modules.auth.service import AuthService

router = APIRouter(tags=["accounts"])


def get_account_eraser(
    firebase: FirebaseClients = Depends(get_firebase),
    auth_service: AuthService = Depends(get_auth_service)
) -> AccountEraser:
    return AccountEraser(
        purger=RecordPurger(firebase.db),
        file_eraser=FileEraser(firebase.bucket),
        auth_service=auth_service,
    )


@router.post("/deleteUserAccount", response_model=DeleteAccountResult)
@limiter.limit(settings.rate_limit)
def delete_user_account(
    request: Request,
    caller: CallerIdentity = Depends(get_caller),
    eraser: AccountEraser = Depends(get_account_eraser)
):
    """GDPR erasure of the calling user's account (Article 17). Callers may only delete themselves.

    The callable takes no input: the request body, whatever its shape, is never parsed.
    """
    return {"result": eraser.erase(caller.uid)}

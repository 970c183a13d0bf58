from pydantic import BaseModel


class DeleteAccountResponse(BaseModel):
    success: bool
    message: str


class DeleteAccountResult(BaseModel):
    result: DeleteAccountResponse

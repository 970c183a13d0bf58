from pydantic import BaseModel
from typing import Optional


class CallerIdentity(BaseModel):
    uid: str
    email: Optional[str] = None

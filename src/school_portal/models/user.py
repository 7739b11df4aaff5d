'''
The acting user, passed explicitly to every service entry point.
'''
from typing import Optional

from pydantic import BaseModel, Field

from .enums import UserRole

class Session(BaseModel):
    """
    Who is acting and with which capability.
    The access token is forwarded to the school backend on every call.
    """
    user_id: str
    role: UserRole
    access_token: Optional[str] = Field(None, repr=False, exclude=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

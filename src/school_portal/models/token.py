'''

'''
from pydantic import BaseModel
from datetime import datetime

from .enums import UserRole

class TokenPayload(BaseModel):
    sub: str # 'sub' is the standard JWT claim for subject (the user's id / username)
    role: UserRole
    exp: datetime

'''
Token handling and the acting-user dependency.
Tokens are issued by the school backend; here they are only verified and
turned into an explicit Session.
'''
from datetime import datetime, timedelta, timezone
from typing import Optional, Annotated
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from ..common.config import settings
from ..common.exceptions import UnauthorizedRoleError
from ..common.logger import log
from ..models.enums import UserRole
from ..models.token import TokenPayload
from ..models.user import Session

# --- JWT Handling ---
class JWTHandler:
    @staticmethod
    def create_access_token(
        subject: str,
        role: UserRole,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        expire = datetime.now(timezone.utc) + expires_delta
        to_encode = {"sub": str(subject), "role": UserRole(role).value, "exp": expire}
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> TokenPayload | None:
        try:
            payload = jwt.decode(
                token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
            )
            return TokenPayload(**payload)
        except (JWTError, ValueError) as e: # Pydantic validation errors too
            log.warning(f"JWT decode/validation error: {e}")
            return None

# --- Session Dependency ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

async def get_current_session(
    token: Annotated[str, Depends(oauth2_scheme)]
) -> Session:
    """
    Verifies the bearer token and returns the acting user's Session.
    The raw token is kept so it can be forwarded to the school backend.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token_data = JWTHandler.decode_token(token)
    if not token_data or not token_data.sub:
        log.warning("JWT decode failed or invalid token structure.")
        raise credentials_exception

    log.info(f"JWT verified for user: {token_data.sub} (Role: {token_data.role.value})")
    return Session(user_id=token_data.sub, role=token_data.role, access_token=token)

def authorize_role(session: Session, allowed_roles: list[UserRole]) -> None:
    """Raises UnauthorizedRoleError unless the session holds one of the roles."""
    if session.role not in allowed_roles:
        allowed = [role.value for role in allowed_roles]
        log.warning(f"Unauthorized action by user {session.user_id} (Role: {session.role.value}). Required one of: {allowed}")
        raise UnauthorizedRoleError("You do not have permission to perform this action.")

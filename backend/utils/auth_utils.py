from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
import os

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status, Request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

load_dotenv()

# Secret key to encode the JWT token
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
# Algorithm used to encode the JWT token
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

ADMIN = "admin"
MANAGER = "manager"
EMPLOYEE = "employee"
ASSOCIATE = "associate"
USER = "user"

ALL_ROLES = [ADMIN, MANAGER, EMPLOYEE, ASSOCIATE, USER]
# Associates have read-only access
WRITE_ROLES = [ADMIN, MANAGER, EMPLOYEE, USER]
ADMIN_ROLES = [ADMIN]


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_current_user(request: Request) -> Dict[str, str]:
    """
    FastAPI dependency to validate the JWT from the Authorization header.

    Returns the token claims: ``sub`` (username), ``role`` and ``uid``.

    Usage:
        @router.get("/secure-data", dependencies=[Depends(get_current_user)])
        def secure_endpoint():
            return {"message": "This is secure data."}
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is missing",
        )

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        payload = jwt.decode(parts[1], SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token validation failed: {e}"
        )

    if not payload.get("sub") or payload.get("role") not in ALL_ROLES:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token claims"
        )
    return payload


def get_user_identifier(user: dict) -> str:
    """Value stored in created_by/updated_by/deleted_by columns."""
    return user.get("sub") or "unknown"


def require_role(roles: List[str]):
    """Dependency factory rejecting users whose role is not in `roles`."""
    def checker(user: dict = Depends(get_current_user)) -> dict:
        if user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Requires one of: {', '.join(roles)}"
            )
        return user
    return checker

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt  # pyjwt

from config import ACCESS_TOKEN_MINUTES, JWT_SECRET

ALGORITHM = "HS256"
COOKIE_NAME = "access_token"


def create_session_token(admin_id: int, email: str, expires_minutes: int = ACCESS_TOKEN_MINUTES) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    claims = {"sub": email, "admin_id": admin_id, "exp": expire}
    return jwt.encode(claims, JWT_SECRET, algorithm=ALGORITHM)


def admin_id_from_token(token: str) -> Optional[int]:
    """None for tampered, expired or foreign tokens."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None

    admin_id = payload.get("admin_id")
    return admin_id if isinstance(admin_id, int) else None

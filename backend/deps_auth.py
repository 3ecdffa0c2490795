"""The single authorization gate used by every admin-scoped route."""
from typing import List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from database import get_db
from errors import Unauthorized
from jwt_utils import COOKIE_NAME, admin_id_from_token
from models import Admin

# cookie is the primary carrier; a bearer header is accepted for scripts
security = HTTPBearer(auto_error=False)


def _candidate_tokens(
    request: Request, creds: Optional[HTTPAuthorizationCredentials]
) -> List[str]:
    tokens = []
    cookie = request.cookies.get(COOKIE_NAME)
    if cookie:
        tokens.append(cookie)
    if creds and creds.credentials:
        tokens.append(creds.credentials)
    return tokens


def get_optional_admin(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[Admin]:
    # a stale cookie must not shadow a valid bearer header
    for token in _candidate_tokens(request, creds):
        admin_id = admin_id_from_token(token)
        if admin_id is None:
            continue
        admin = db.query(Admin).filter(Admin.id == admin_id).first()
        if admin:
            return admin
    return None


def get_current_admin(admin: Optional[Admin] = Depends(get_optional_admin)) -> Admin:
    if admin is None:
        raise Unauthorized("Unauthorized")
    return admin

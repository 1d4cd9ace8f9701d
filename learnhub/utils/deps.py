from typing import Iterable

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from learnhub.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from learnhub.core.database import get_db
from learnhub.core.exceptions import Unauthenticated
from learnhub.core.security import decode_access_token
from learnhub.crud.token_denylist import token_denylist as token_denylist_crud
from learnhub.crud.user import user as user_crud
from learnhub.models.user import User
from learnhub.schemas.token import TokenPayload
from learnhub.services.chat import ResponseGenerator, default_response_generator
from learnhub.utils.permission import PermissionHelper

http_bearer = HTTPBearer(auto_error=False)


def get_transactional_db(db: Session = Depends(get_db)):
    """Same request session as ``get_db``, committed on success and rolled back on any error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def get_token_payload(
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer),
) -> TokenPayload:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthenticated("Authentication required")
    try:
        payload = decode_access_token(credentials.credentials)
        return TokenPayload(**payload)
    except JWTError:
        raise Unauthenticated("Could not validate credentials")
    except ValidationError:
        raise Unauthenticated("Invalid token payload")


def get_current_user(
    db: Session = Depends(get_db),
    token_data: TokenPayload = Depends(get_token_payload),
) -> User:
    if token_data.jti and token_denylist_crud.get_by_jti(db, jti=token_data.jti):
        raise Unauthenticated("Token has been revoked")

    # The role claim is informational; the live row is authoritative.
    user = user_crud.get(db, id=token_data.user_id)
    if not user:
        raise Unauthenticated("User not found")
    return user


def require_roles(roles: Iterable):
    """Endpoint-level role gate."""
    allowed = frozenset(roles)

    def _verify_role(current_user: User = Depends(get_current_user)) -> User:
        PermissionHelper.require_role(current_user, allowed)
        return current_user
    return _verify_role


class PageParams(BaseModel):
    page: int
    limit: int


def get_pagination(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
) -> PageParams:
    return PageParams(page=page, limit=min(limit, MAX_PAGE_SIZE))


def get_response_generator() -> ResponseGenerator:
    return default_response_generator

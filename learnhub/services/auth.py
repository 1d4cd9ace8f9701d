import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from learnhub.core.exceptions import Unauthenticated
from learnhub.core.security import verify_password, create_access_token
from learnhub.crud.user import user as crud_user
from learnhub.crud.token_denylist import token_denylist as crud_token_denylist
from learnhub.models.user import User
from learnhub.schemas.token import LoginResponse, Token, TokenPayload, TokenDenylistCreate
from learnhub.schemas.user import User as UserSchema

logger = logging.getLogger(__name__)


class AuthService:
    def _issue_token(self, user: User) -> Token:
        access_token = create_access_token(data={"user_id": user.id, "role": user.role.value})
        return Token(access_token=access_token, token_type="bearer")

    def login(self, db: Session, *, email: str, password: str) -> LoginResponse:
        user = crud_user.get_by_email(db, email=email)
        if not user or not verify_password(password, user.hashed_password):
            raise Unauthenticated("Incorrect email or password")

        logger.info(f"User {user.id} logged in")
        return LoginResponse(user=UserSchema.model_validate(user), token=self._issue_token(user))

    def refresh_token(self, db: Session, *, current_user: User) -> Token:
        return self._issue_token(current_user)

    def change_password(self, db: Session, *, current_user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, current_user.hashed_password):
            raise Unauthenticated("Current password is incorrect")
        crud_user.update_password(db, db_obj=current_user, password=new_password)
        logger.info(f"User {current_user.id} changed their password")

    def logout(self, db: Session, *, token_data: TokenPayload) -> None:
        if not token_data.jti:
            return
        exp = (
            datetime.fromtimestamp(token_data.exp, tz=timezone.utc)
            if token_data.exp
            else datetime.now(timezone.utc)
        )
        crud_token_denylist.revoke(db, obj_in=TokenDenylistCreate(jti=token_data.jti, exp=exp))
        logger.info(f"Token {token_data.jti} revoked for user {token_data.user_id}")

auth_service = AuthService()

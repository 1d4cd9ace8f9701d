from sqlalchemy.orm import Session
from learnhub.crud.base import CRUDBase
from learnhub.models.token_denylist import TokenDenylist
from learnhub.schemas.token import TokenDenylistCreate


class CRUDTokenDenylist(CRUDBase[TokenDenylist, TokenDenylistCreate, TokenDenylistCreate]):
    def get_by_jti(self, db: Session, *, jti: str) -> TokenDenylist | None:
        return db.query(TokenDenylist).filter(TokenDenylist.jti == jti).first()

    def revoke(self, db: Session, *, obj_in: TokenDenylistCreate) -> TokenDenylist:
        existing = self.get_by_jti(db, jti=obj_in.jti)
        if existing:
            return existing
        return self.create(db, obj_in=obj_in.model_dump())

token_denylist = CRUDTokenDenylist(TokenDenylist)

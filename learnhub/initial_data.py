import logging

from learnhub.core.config import settings
from learnhub.core.constants import RoleEnum
from learnhub.core.database import SessionLocal
from learnhub.core.logging import configure_logging
from learnhub.crud.user import user as crud_user
from learnhub.models import registry  # noqa: F401
from learnhub.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def seed_admin(db) -> bool:
    """Create the first admin from settings. Returns False when nothing was created."""
    if not settings.FIRST_ADMIN_EMAIL or not settings.FIRST_ADMIN_PASSWORD:
        logger.warning("FIRST_ADMIN_EMAIL / FIRST_ADMIN_PASSWORD not set, skipping admin seed")
        return False

    if crud_user.get_by_email(db, email=settings.FIRST_ADMIN_EMAIL):
        logger.info(f"Admin {settings.FIRST_ADMIN_EMAIL} already exists")
        return False

    admin_in = UserCreate(
        name=settings.FIRST_ADMIN_NAME,
        email=settings.FIRST_ADMIN_EMAIL,
        password=settings.FIRST_ADMIN_PASSWORD,
        role=RoleEnum.ADMIN,
    )
    admin = crud_user.create_with_password(db, obj_in=admin_in)
    db.commit()
    logger.info(f"Created admin user {admin.id} ({admin.email})")
    return True


def main() -> None:
    configure_logging()
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()

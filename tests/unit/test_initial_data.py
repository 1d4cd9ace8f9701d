from learnhub.core.config import settings
from learnhub.core.constants import RoleEnum
from learnhub.core.security import verify_password
from learnhub.crud.user import user as crud_user
from learnhub.initial_data import seed_admin


def test_seed_admin_creates_once(db_session, monkeypatch):
    monkeypatch.setattr(settings, "FIRST_ADMIN_EMAIL", "root@learnhub.com")
    monkeypatch.setattr(settings, "FIRST_ADMIN_PASSWORD", "bootstrap-pass")

    assert seed_admin(db_session) is True
    assert seed_admin(db_session) is False

    admin = crud_user.get_by_email(db_session, email="root@learnhub.com")
    assert admin.role == RoleEnum.ADMIN
    assert verify_password("bootstrap-pass", admin.hashed_password)


def test_seed_admin_skips_without_credentials(db_session, monkeypatch):
    monkeypatch.setattr(settings, "FIRST_ADMIN_EMAIL", None)
    assert seed_admin(db_session) is False

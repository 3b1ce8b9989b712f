"""
Admin seeding script for the booking desk.

Creates the tables and the bootstrap admin when the user store holds no
admin account. Optionally resets the admin password.

Usage:
    python seed_admin.py
    python seed_admin.py --reset-password

Environment variables (optional):
    DEFAULT_ADMIN_USERNAME: Username for admin account (default: admin)
    DEFAULT_ADMIN_PASSWORD: Password for admin account (default: admin123)
"""
import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from core.database import SessionLocal, engine, Base
from models.user import User
from services.auth_service import AuthService
from services.config_service import get_default_admin_credentials

log = logging.getLogger("seed_admin")


def seed_admin(reset_password: bool = False) -> bool:
    """Seed the admin account into the database."""
    username, password = get_default_admin_credentials()
    db = SessionLocal()
    try:
        Base.metadata.create_all(bind=engine)
        created = AuthService.ensure_default_admin(db)
        if created is not None:
            log.info("Admin %s is ready", created.username)
            return True

        admin = db.query(User).filter(User.username == username).first()  # type: ignore
        if admin is None:
            log.info("An admin account already exists; nothing to do")
            return True
        if reset_password:
            admin.hashed_password = AuthService.get_password_hash(password)  # type: ignore[assignment]
            db.commit()
            log.info("Admin password for %s updated", username)
        else:
            log.info("Admin %s already exists; use --reset-password to change it", username)
        return True
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("Error seeding admin: %s", exc, exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Seed the booking desk admin account")
    parser.add_argument("--reset-password", action="store_true", help="reset the admin password from the environment")
    args = parser.parse_args()
    sys.exit(0 if seed_admin(args.reset_password) else 1)

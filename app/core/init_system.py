import logging
from app.core.config import settings
from app.database import SessionLocal
from app.models.user import User, UserRole
from app.services import auth as auth_service

logger = logging.getLogger(__name__)


def init_system_data():
    """
    Bootstraps the first administrator when the directory is empty and
    ADMIN_EMAIL / ADMIN_PASSWORD are configured.
    """
    if not settings.admin_email or not settings.admin_password:
        logger.info("System initialization check: no bootstrap admin configured.")
        return

    db = SessionLocal()
    try:
        user_count = db.query(User).count()
        if user_count == 0:
            logger.info("Running startup initialization...")
            admin_user = User(
                email=settings.admin_email,
                hashed_password=auth_service.get_password_hash(settings.admin_password),
                first_name="System",
                last_name="Administrator",
                role=UserRole.SUPER_ADMIN,
                is_active=True,
            )
            db.add(admin_user)
            db.commit()
            logger.info(f"✓ Created bootstrap admin: {settings.admin_email}")
        else:
            logger.info(f"System initialization check: {user_count} user(s) found.")

    except Exception as e:
        db.rollback()
        logger.error(f"Error during system initialization check: {str(e)}", exc_info=True)
    finally:
        db.close()

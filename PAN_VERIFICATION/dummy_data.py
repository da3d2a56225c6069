import logging
from sqlalchemy.orm import Session
from models.user import User
from repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"id": 1, "name": "John Doe",   "email": "john@example.com", "password": "password123"},
    {"id": 2, "name": "Jane Smith", "email": "jane@example.com", "password": "password123"},
]


def seed_users(db: Session) -> int:
    """Insert the demo accounts into an empty users table. Returns how many were added."""
    if UserRepository.count_all_users(db) > 0:
        return 0

    try:
        for record in DEMO_USERS:
            db.add(User(**record))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Seeded {len(DEMO_USERS)} demo users")
    return len(DEMO_USERS)

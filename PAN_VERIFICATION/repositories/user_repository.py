from sqlalchemy import func
from sqlalchemy.orm import Session
from models.user import User
from typing import Optional

class UserRepository:

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_by_credentials(db: Session, email: str, password: str) -> Optional[User]:
        return db.query(User).filter(
            User.email == email,
            User.password == password,
        ).first()

    @staticmethod
    def next_id(db: Session) -> int:
        current = db.query(func.max(User.id)).scalar()
        return (current or 0) + 1

    @staticmethod
    def create_user(db: Session, user: User) -> User:
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def count_all_users(db: Session) -> int:
        return db.query(User).count()

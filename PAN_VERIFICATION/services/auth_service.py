import logging
import re
import time
from fastapi import HTTPException
from sqlalchemy.orm import Session
from core.config import PASSWORD_MIN_LENGTH
from models.user import User
from repositories.user_repository import UserRepository
from schemas.auth_schema import LoginRequest, RegisterRequest, UserOut

logger = logging.getLogger(__name__)

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def issue_mock_token(user_id: int) -> str:
    # Placeholder only. Not a credential; swap for real token issuance before any real use.
    return f"token_{user_id}_{int(time.time() * 1000)}"


class AuthService:

    @staticmethod
    def login(db: Session, request: LoginRequest) -> dict:
        if not request.email or not request.password:
            raise HTTPException(400, "Email and password are required")

        user = UserRepository.get_by_credentials(db, request.email, request.password)
        if not user:
            logger.info("Login rejected: invalid credentials")
            raise HTTPException(401, "Invalid email or password")

        logger.info(f"Login successful for user_id={user.id}")
        return {
            "user":    UserOut.model_validate(user, from_attributes=True),
            "token":   issue_mock_token(user.id),
            "message": "Login successful",
        }

    @staticmethod
    def register(db: Session, request: RegisterRequest) -> dict:
        if not request.name or not request.email or not request.password:
            raise HTTPException(400, "Name, email, and password are required")

        if UserRepository.get_by_email(db, request.email):
            raise HTTPException(409, "User with this email already exists")

        if not EMAIL_REGEX.match(request.email):
            raise HTTPException(400, "Invalid email format")

        if len(request.password) < PASSWORD_MIN_LENGTH:
            raise HTTPException(
                400, f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
            )

        new_user = User(
            id       = UserRepository.next_id(db),
            name     = request.name,
            email    = request.email,
            password = request.password,
        )
        user = UserRepository.create_user(db, new_user)
        logger.info(f"Registered user_id={user.id}")

        return {
            "user":    UserOut.model_validate(user, from_attributes=True),
            "token":   issue_mock_token(user.id),
            "message": "Registration successful",
        }

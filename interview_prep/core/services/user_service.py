import re

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

from interview_prep.core.database_models import UserTable
from interview_prep.core.models import User, UserCreate, UserResponse
from interview_prep.core.services.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidInputError,
)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MAX_EMAIL_LENGTH = 254
MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(self, db_session: DBSession):
        self.db_session = db_session

    def register(self, user_create: UserCreate) -> User:
        """Validate and store a new user with a bcrypt password hash.

        Raises:
            InvalidInputError: If the name, email or password is unacceptable
            EmailAlreadyRegisteredError: If the email is already taken
        """
        email = normalize_email(user_create.email)
        full_name = user_create.full_name.strip()
        self._validate_registration(full_name, email, user_create.password)

        if self.get_user_by_email(email):
            raise EmailAlreadyRegisteredError(email)

        user_table = UserTable(
            email=email,
            full_name=full_name,
            password_hash=hash_password(user_create.password),
        )
        self.db_session.add(user_table)
        try:
            self.db_session.commit()
        except IntegrityError as e:
            # lost a race against a concurrent signup with the same email
            self.db_session.rollback()
            raise EmailAlreadyRegisteredError(email) from e

        self.db_session.refresh(user_table)
        return self._table_to_model(user_table)

    def authenticate(self, email: str, password: str) -> User:
        """Return the user for matching credentials.

        Unknown email and wrong password raise the same error.
        """
        user = self.get_user_by_email(normalize_email(email))
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user

    def get_user_by_id(self, user_id: str) -> User | None:
        """Get user by ID."""
        query = select(UserTable).where(UserTable.id == user_id)
        user_table = self.db_session.execute(query).scalar_one_or_none()

        if user_table:
            return self._table_to_model(user_table)
        return None

    def get_user_by_email(self, email: str) -> User | None:
        """Get user by (normalized) email."""
        query = select(UserTable).where(UserTable.email == email)
        user_table = self.db_session.execute(query).scalar_one_or_none()

        if user_table:
            return self._table_to_model(user_table)
        return None

    def _validate_registration(self, full_name: str, email: str, password: str) -> None:
        if not full_name:
            raise InvalidInputError("full_name", "Full name is required")

        if len(email) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(email):
            raise InvalidInputError("email", "Valid email is required")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError("password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise InvalidInputError("password", f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    def _table_to_model(self, user_table: UserTable) -> User:
        """Convert UserTable to User model."""
        return User(
            id=user_table.id,
            email=user_table.email,
            full_name=user_table.full_name,
            password_hash=user_table.password_hash,
            created_at=user_table.created_at,
            updated_at=user_table.updated_at,
        )

    def to_response(self, user: User) -> UserResponse:
        """Convert User model to UserResponse."""
        return UserResponse(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            created_at=user.created_at,
        )

import pytest

from interview_prep.core.models import UserCreate
from interview_prep.core.services.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidInputError,
)
from interview_prep.core.services.user_service import UserService, hash_password, verify_password
from interview_prep.core.storage import DatabaseManager

PASSWORD = "s3cret-passphrase"


@pytest.fixture
def db_session(tmp_path):
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'users.db'}")
    with manager.SessionLocal() as session:
        yield session
    manager.dispose()


@pytest.fixture
def user_service(db_session):
    return UserService(db_session)


def _register(service: UserService, email: str = "ada@example.com", password: str = PASSWORD):
    return service.register(UserCreate(full_name="Ada Lovelace", email=email, password=password))


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password(PASSWORD)

        assert hashed != PASSWORD
        assert hashed.startswith("$2")

    def test_verify(self):
        hashed = hash_password(PASSWORD)

        assert verify_password(PASSWORD, hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_verify_with_corrupt_hash(self):
        assert verify_password(PASSWORD, "not-a-bcrypt-hash") is False


class TestRegister:
    def test_register_normalizes_email(self, user_service):
        user = _register(user_service, email="  Ada@Example.COM ")

        assert user.email == "ada@example.com"
        assert user.full_name == "Ada Lovelace"
        assert verify_password(PASSWORD, user.password_hash)

    def test_duplicate_email(self, user_service):
        _register(user_service)

        with pytest.raises(EmailAlreadyRegisteredError):
            _register(user_service, email="ADA@example.com")

    @pytest.mark.parametrize(
        "full_name,email,password,field",
        [
            ("  ", "ada@example.com", PASSWORD, "full_name"),
            ("Ada", "ada@", PASSWORD, "email"),
            ("Ada", "ada example.com", PASSWORD, "email"),
            ("Ada", "ada@example.com", "short", "password"),
            ("Ada", "ada@example.com", "x" * 73, "password"),
        ],
    )
    def test_invalid_input(self, user_service, full_name, email, password, field):
        with pytest.raises(InvalidInputError) as exc_info:
            user_service.register(UserCreate(full_name=full_name, email=email, password=password))

        assert exc_info.value.field == field

    def test_response_hides_password_hash(self, user_service):
        user = _register(user_service)

        response = user_service.to_response(user)

        assert "password_hash" not in response.model_dump()
        assert response.id == user.id


class TestAuthenticate:
    def test_correct_credentials(self, user_service):
        registered = _register(user_service)

        assert user_service.authenticate("ADA@example.com", PASSWORD).id == registered.id

    def test_wrong_password(self, user_service):
        _register(user_service)

        with pytest.raises(InvalidCredentialsError, match="Incorrect email or password"):
            user_service.authenticate("ada@example.com", "wrong-password")

    def test_unknown_email(self, user_service):
        with pytest.raises(InvalidCredentialsError):
            user_service.authenticate("nobody@example.com", PASSWORD)

    def test_get_user_by_id(self, user_service):
        registered = _register(user_service)

        assert user_service.get_user_by_id(registered.id).email == "ada@example.com"
        assert user_service.get_user_by_id("missing") is None

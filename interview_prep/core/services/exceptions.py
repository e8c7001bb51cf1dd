"""Service layer exceptions for business logic errors."""


class SessionNotFoundError(Exception):
    """Raised when a session does not exist or belongs to another user."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"No session found with ID {session_id}")


class QuestionNotFoundError(Exception):
    """Raised when a question is not part of the given session and user."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"No question found with ID {question_id}")


class InvalidInputError(Exception):
    """Raised when a field fails a business rule the request schema cannot express."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class EmailAlreadyRegisteredError(Exception):
    """Raised when signing up with an email that already has an account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("An account with this email already exists")


class InvalidCredentialsError(Exception):
    """Raised when login credentials do not match a user."""

    def __init__(self):
        super().__init__("Incorrect email or password")

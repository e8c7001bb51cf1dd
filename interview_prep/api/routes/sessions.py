from typing import Annotated

from fastapi import APIRouter, Depends, Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from interview_prep.api.dependencies import get_current_user_id, get_session_service
from interview_prep.api.exceptions import (
    QuestionNotFoundAPIException,
    SessionNotFoundAPIException,
    ValidationException,
)
from interview_prep.api.schemas import (
    ExplanationResponse,
    GeneratedQuestionsResponse,
    QuestionListData,
    QuestionOut,
    SessionCreateRequest,
    SessionData,
    SessionListData,
    SessionListResponse,
    SessionOut,
    SessionResponse,
    SessionUpdateRequest,
)
from interview_prep.core.models import SessionUpdate
from interview_prep.core.services import SessionService
from interview_prep.core.services.exceptions import (
    InvalidInputError,
    QuestionNotFoundError,
    SessionNotFoundError,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])

# Handlers are plain functions: they block on the database and the model
# provider, so FastAPI runs them in its threadpool.


@router.post("", response_model=SessionResponse, status_code=HTTP_201_CREATED)
def create_session(
    request: SessionCreateRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> SessionResponse:
    """Create a session and generate its first questions."""
    try:
        session = session_service.create_session(
            user_id=user_id,
            title=request.title,
            skills=request.skills,
            experience=request.experience,
            description=request.description,
        )
    except InvalidInputError as e:
        raise ValidationException(str(e), e.field) from e
    return SessionResponse(data=SessionData(session=SessionOut.from_session(session)))


@router.get("", response_model=SessionListResponse)
def list_sessions(
    user_id: Annotated[str, Depends(get_current_user_id)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> SessionListResponse:
    """List the caller's sessions, newest first."""
    sessions = [SessionOut.from_session(s) for s in session_service.list_sessions(user_id)]
    return SessionListResponse(results=len(sessions), data=SessionListData(sessions=sessions))


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> SessionResponse:
    try:
        session = session_service.get_session(session_id, user_id)
    except SessionNotFoundError as e:
        raise SessionNotFoundAPIException(session_id) from e
    return SessionResponse(data=SessionData(session=SessionOut.from_session(session)))


@router.put("/{session_id}", response_model=SessionResponse)
def update_session(
    session_id: str,
    request: SessionUpdateRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> SessionResponse:
    """Replace only the fields present in the body."""
    try:
        session = session_service.update_session(session_id, user_id, SessionUpdate(**request.model_dump()))
    except SessionNotFoundError as e:
        raise SessionNotFoundAPIException(session_id) from e
    return SessionResponse(data=SessionData(session=SessionOut.from_session(session)))


@router.delete("/{session_id}", status_code=HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> Response:
    """Delete a session together with all of its questions."""
    try:
        session_service.delete_session(session_id, user_id)
    except SessionNotFoundError as e:
        raise SessionNotFoundAPIException(session_id) from e
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get("/{session_id}/questions/{question_id}/details", response_model=ExplanationResponse)
def get_question_details(
    session_id: str,
    question_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> ExplanationResponse:
    try:
        explanation = session_service.question_details(session_id, question_id, user_id)
    except QuestionNotFoundError as e:
        raise QuestionNotFoundAPIException(question_id) from e
    return ExplanationResponse(data=explanation)


@router.post("/{session_id}/generate-questions", response_model=GeneratedQuestionsResponse)
def generate_more_questions(
    session_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> GeneratedQuestionsResponse:
    """Append another batch of questions; only the new ones are returned."""
    try:
        questions = session_service.generate_more(session_id, user_id)
    except SessionNotFoundError as e:
        raise SessionNotFoundAPIException(session_id) from e
    except InvalidInputError as e:
        raise ValidationException(str(e), e.field) from e
    return GeneratedQuestionsResponse(
        data=QuestionListData(questions=[QuestionOut.from_question(q) for q in questions])
    )

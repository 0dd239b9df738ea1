"""
Async data-access layer for a question/answer service.

    from qa_dao import create_engine_from_settings, create_session_factory, get_settings
    from qa_dao import QuestionRepository, AnswerRepository

    engine = create_engine_from_settings(get_settings())
    session_factory = create_session_factory(engine)
    questions = QuestionRepository(session_factory)
"""

from qa_dao.config import Settings, get_settings
from qa_dao.database import create_engine, create_engine_from_settings, create_session_factory
from qa_dao.exceptions import (
    DbErrorKind,
    DbError,
    CreationError,
    NotFoundError,
    InvalidUuidError,
    AccessError,
    FromRowError,
    DeletionError,
    UpdateError,
    CommitError,
)
from qa_dao.repositories import QuestionDao, AnswerDao, QuestionRepository, AnswerRepository
from qa_dao.schemas import EntityId, Question, NewQuestion, Answer, NewAnswer

__all__ = [
    "Settings",
    "get_settings",
    "create_engine",
    "create_engine_from_settings",
    "create_session_factory",
    "DbErrorKind",
    "DbError",
    "CreationError",
    "NotFoundError",
    "InvalidUuidError",
    "AccessError",
    "FromRowError",
    "DeletionError",
    "UpdateError",
    "CommitError",
    "QuestionDao",
    "AnswerDao",
    "QuestionRepository",
    "AnswerRepository",
    "EntityId",
    "Question",
    "NewQuestion",
    "Answer",
    "NewAnswer",
]

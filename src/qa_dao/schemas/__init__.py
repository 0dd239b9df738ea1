"""
Domain records exchanged with callers of the repositories.

    from qa_dao.schemas import Question, NewQuestion, Answer, NewAnswer, EntityId
"""

from .identifiers import EntityId, resolve_entity_id
from .question import Question, NewQuestion
from .answer import Answer, NewAnswer

__all__ = [
    "EntityId",
    "resolve_entity_id",
    "Question",
    "NewQuestion",
    "Answer",
    "NewAnswer",
]

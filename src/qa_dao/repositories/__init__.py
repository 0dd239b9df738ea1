"""
Repository layer initialization module.

Usage:
    from qa_dao.repositories import QuestionRepository, AnswerRepository
"""

from .base_repository import BaseRepository
from .protocols import QuestionDao, AnswerDao
from .question_repository import QuestionRepository
from .answer_repository import AnswerRepository

__all__ = [
    "BaseRepository",
    "QuestionDao",
    "AnswerDao",
    "QuestionRepository",
    "AnswerRepository",
]

"""
ORM table mappings. Importing this package registers both tables on
`qa_dao.database.Base.metadata`.

    from qa_dao.models import QuestionORM, AnswerORM
"""

from .question import QuestionORM
from .answer import AnswerORM

__all__ = [
    "QuestionORM",
    "AnswerORM",
]

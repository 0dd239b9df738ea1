"""
Answer repository.

Answers always belong to a question. The parent id is resolved before any
statement is issued, and a reference to a missing question is rejected by the
foreign key, surfacing as CreationError.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from qa_dao.models.answer import AnswerORM
from qa_dao.schemas import Answer, EntityId, NewAnswer
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AnswerRepository(BaseRepository[AnswerORM, Answer]):
    """Storage for answers. Implements `AnswerDao`."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(AnswerORM, Answer, session_factory)

    async def create_answer(self, new_answer: NewAnswer) -> UUID:
        """
        Persist an answer to an existing question.

        Raises:
            InvalidUuidError: `new_answer.question_id` is malformed. Nothing is sent
                to the store.
            CreationError: the question does not exist or the insert failed.
        """
        question_id = self._resolve(EntityId(new_answer.question_id), "create")
        return await self.create(question_id=question_id, answer=new_answer.answer)

    async def get_answer(self, answer_id: EntityId) -> Answer:
        return await self.get_by_id(answer_id)

    async def get_answers(self, question_id: EntityId) -> list[Answer]:
        """
        Answers to one question, newest first.

        An unknown question yields an empty list, not NotFoundError.
        """
        question_uuid = self._resolve(question_id, "get_all")
        answers = await self.get_all(AnswerORM.question_id == question_uuid)
        logger.debug(f"Retrieved {len(answers)} answers for question {question_uuid}")
        return answers

    async def get_all_answers(self) -> list[Answer]:
        return await self.get_all()

    async def delete_answer(self, answer_id: EntityId) -> UUID:
        return await self.delete(answer_id)

    async def increment_answer_likes(self, answer_id: EntityId) -> None:
        await self.increment_likes(answer_id)

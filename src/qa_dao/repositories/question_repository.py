"""
Question repository.

Thin specialization of BaseRepository for the `questions` table. Deleting a
question also removes its answers through the ON DELETE CASCADE foreign key.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from qa_dao.models.question import QuestionORM
from qa_dao.schemas import EntityId, NewQuestion, Question
from .base_repository import BaseRepository


class QuestionRepository(BaseRepository[QuestionORM, Question]):
    """Storage for questions. Implements `QuestionDao`."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(QuestionORM, Question, session_factory)

    async def create_question(self, new_question: NewQuestion) -> UUID:
        return await self.create(title=new_question.title, question=new_question.question)

    async def get_question(self, question_id: EntityId) -> Question:
        return await self.get_by_id(question_id)

    async def get_questions(self) -> list[Question]:
        """All questions, newest first."""
        return await self.get_all()

    async def delete_question(self, question_id: EntityId) -> UUID:
        return await self.delete(question_id)

    async def increment_question_likes(self, question_id: EntityId) -> None:
        await self.increment_likes(question_id)

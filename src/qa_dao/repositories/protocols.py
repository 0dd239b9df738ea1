"""
Abstract contracts for question and answer storage.

Callers (request handlers, services) depend on these protocols rather than on the
concrete repositories, so a test double or another backend can be substituted.
Every method is a coroutine and may run concurrently with any other.
"""

from typing import Protocol, runtime_checkable
from uuid import UUID

from qa_dao.schemas import Answer, EntityId, NewAnswer, NewQuestion, Question


@runtime_checkable
class QuestionDao(Protocol):
    async def create_question(self, new_question: NewQuestion) -> UUID: ...

    async def get_question(self, question_id: EntityId) -> Question: ...

    async def get_questions(self) -> list[Question]: ...

    async def delete_question(self, question_id: EntityId) -> UUID: ...

    async def increment_question_likes(self, question_id: EntityId) -> None: ...


@runtime_checkable
class AnswerDao(Protocol):
    async def create_answer(self, new_answer: NewAnswer) -> UUID: ...

    async def get_answer(self, answer_id: EntityId) -> Answer: ...

    async def get_answers(self, question_id: EntityId) -> list[Answer]: ...

    async def get_all_answers(self) -> list[Answer]: ...

    async def delete_answer(self, answer_id: EntityId) -> UUID: ...

    async def increment_answer_likes(self, answer_id: EntityId) -> None: ...


__all__ = ["QuestionDao", "AnswerDao"]

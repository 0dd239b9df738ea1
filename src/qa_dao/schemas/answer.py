from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, NonNegativeInt


class NewAnswer(BaseModel):
    """
    A new answer received from a request.

    `question_id` is kept as the raw string; AnswerRepository.create_answer resolves
    it before any statement is issued.
    """

    question_id: str
    answer: str


class Answer(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True)

    id: UUID
    question_id: UUID
    answer: str
    likes: NonNegativeInt
    created_at: datetime

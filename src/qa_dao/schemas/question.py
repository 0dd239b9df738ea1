from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, NonNegativeInt


class NewQuestion(BaseModel):
    """A new question received from a request. Shape-checked only."""

    title: str
    question: str


class Question(BaseModel):
    """
    A question that has been persisted.

    Strict validation: a row whose columns are missing or of the wrong type fails
    to map instead of being coerced.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: UUID
    title: str
    question: str
    likes: NonNegativeInt
    created_at: datetime

from sqlalchemy import Integer, Text, DateTime, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from qa_dao.database.base import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .answer import AnswerORM


class QuestionORM(Base):
    """
    Table mapping for a question.

    Repositories never hand these objects to callers; rows are selected column by
    column and mapped into `qa_dao.schemas.Question`.
    """
    __tablename__ = "questions"

    # Generated as part of the INSERT and read back with RETURNING
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    question: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    # Only ever changed by increment_question_likes
    likes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # --- Relationships ---

    # One-to-Many: deleting a question removes its answers (ON DELETE CASCADE on answers.question_id)
    answers: Mapped[list["AnswerORM"]] = relationship(
        "AnswerORM",
        back_populates="question",
        passive_deletes=True,
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<QuestionORM(id={self.id!r}, title={self.title!r}, likes={self.likes!r})>"

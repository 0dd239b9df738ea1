from sqlalchemy import Integer, Text, DateTime, ForeignKey, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from qa_dao.database.base import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .question import QuestionORM


class AnswerORM(Base):
    """
    Table mapping for an answer to a question.

    The foreign key is enforced by the store; the repository does not check that
    the question exists before inserting.
    """
    __tablename__ = "answers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    question_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    answer: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

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

    question: Mapped["QuestionORM"] = relationship(
        "QuestionORM",
        back_populates="answers"
    )

    def __repr__(self) -> str:
        return f"<AnswerORM(id={self.id!r}, question_id={self.question_id!r}, likes={self.likes!r})>"

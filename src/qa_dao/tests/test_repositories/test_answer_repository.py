import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from qa_dao.exceptions import (
    AccessError,
    CreationError,
    FromRowError,
    InvalidUuidError,
    NotFoundError,
)
from qa_dao.repositories import AnswerDao, AnswerRepository
from qa_dao.schemas import Answer, EntityId, NewAnswer


async def test_answer_repository_satisfies_protocol(answer_repository):
    assert isinstance(answer_repository, AnswerDao)


@pytest.mark.asyncio
class TestCreateAnswer:

    async def test_create_then_get_round_trip(self, answer_repository: AnswerRepository, created_question_id):
        payload = NewAnswer(question_id=str(created_question_id), answer="Use a row lock.")

        answer_id = await answer_repository.create_answer(payload)

        answer = await answer_repository.get_answer(EntityId(str(answer_id)))
        assert isinstance(answer, Answer)
        assert answer.id == answer_id
        assert answer.question_id == created_question_id
        assert answer.answer == "Use a row lock."
        assert answer.likes == 0
        assert isinstance(answer.created_at, datetime)

    async def test_malformed_question_id_is_rejected_before_any_statement(
        self, answer_repository, executed_statements
    ):
        """
        Behavior:
            - The parent id inside the payload is resolved first; a malformed one
              raises InvalidUuidError and nothing is sent to the store.
        """
        with pytest.raises(InvalidUuidError):
            await answer_repository.create_answer(NewAnswer(question_id="question-1", answer="text"))

        assert executed_statements == []

    async def test_unknown_question_is_creation_error(self, answer_repository):
        """
        Behavior:
            - The foreign key rejects an answer to a question that does not exist.
            - No answer row is left behind.
        """
        payload = NewAnswer(question_id=str(uuid.uuid4()), answer="orphan")

        with pytest.raises(CreationError) as exc_info:
            await answer_repository.create_answer(payload)

        assert exc_info.value.http_status() == 400
        assert exc_info.value.to_payload()["code"] == "creation"
        assert await answer_repository.get_all_answers() == []

    async def test_unavailable_store_is_creation_error(self, unavailable_session_factory):
        repo = AnswerRepository(unavailable_session_factory)

        with pytest.raises(CreationError):
            await repo.create_answer(NewAnswer(question_id=str(uuid.uuid4()), answer="text"))


@pytest.mark.asyncio
class TestGetAnswer:

    async def test_unknown_id_is_not_found(self, answer_repository):
        with pytest.raises(NotFoundError):
            await answer_repository.get_answer(EntityId(str(uuid.uuid4())))

    async def test_malformed_id_issues_no_statement(self, answer_repository, executed_statements):
        with pytest.raises(InvalidUuidError):
            await answer_repository.get_answer(EntityId("0f8fad5bd9cb469fa16570867728950e"))

        assert executed_statements == []

    async def test_unmappable_row_is_from_row_error(self, answer_repository, created_question_id, insert_answer_row):
        answer_id = await insert_answer_row(created_question_id, likes=-3)

        with pytest.raises(FromRowError):
            await answer_repository.get_answer(EntityId(str(answer_id)))


@pytest.mark.asyncio
class TestListAnswers:

    async def test_answers_for_one_question_only(
        self, answer_repository, question_repository, created_question_id, created_answer_ids, new_question
    ):
        other_question_id = await question_repository.create_question(new_question)
        await answer_repository.create_answer(NewAnswer(question_id=str(other_question_id), answer="elsewhere"))

        answers = await answer_repository.get_answers(EntityId(str(created_question_id)))

        assert {a.id for a in answers} == set(created_answer_ids)
        assert all(a.question_id == created_question_id for a in answers)

    async def test_unknown_question_returns_empty_list(self, answer_repository, created_answer_ids):
        assert await answer_repository.get_answers(EntityId(str(uuid.uuid4()))) == []

    async def test_malformed_question_id_is_invalid_uuid(self, answer_repository, executed_statements):
        with pytest.raises(InvalidUuidError):
            await answer_repository.get_answers(EntityId("not-a-uuid"))

        assert executed_statements == []

    async def test_answers_newest_first(self, answer_repository, created_question_id, insert_answer_row):
        now = datetime.now(timezone.utc)
        older = await insert_answer_row(created_question_id, created_at=now - timedelta(minutes=5))
        newer = await insert_answer_row(created_question_id, created_at=now)

        answers = await answer_repository.get_answers(EntityId(str(created_question_id)))

        assert [a.id for a in answers] == [newer, older]

    async def test_get_all_answers_spans_questions(
        self, answer_repository, question_repository, created_question_id, created_answer_ids, new_question
    ):
        other_question_id = await question_repository.create_question(new_question)
        other_answer_id = await answer_repository.create_answer(
            NewAnswer(question_id=str(other_question_id), answer="elsewhere")
        )

        answers = await answer_repository.get_all_answers()

        assert {a.id for a in answers} == {*created_answer_ids, other_answer_id}

    async def test_get_all_answers_empty(self, answer_repository):
        assert await answer_repository.get_all_answers() == []

    async def test_unmappable_row_fails_listing(self, answer_repository, created_question_id, insert_answer_row):
        await insert_answer_row(created_question_id)
        await insert_answer_row(created_question_id, likes=-1)

        with pytest.raises(FromRowError):
            await answer_repository.get_answers(EntityId(str(created_question_id)))

    async def test_unavailable_store_is_access_error(self, unavailable_session_factory):
        repo = AnswerRepository(unavailable_session_factory)

        with pytest.raises(AccessError):
            await repo.get_answers(EntityId(str(uuid.uuid4())))
        with pytest.raises(AccessError):
            await repo.get_all_answers()


@pytest.mark.asyncio
class TestDeleteAnswer:

    async def test_delete_returns_id_and_keeps_question(
        self, answer_repository, question_repository, created_question_id, created_answer_ids
    ):
        target = created_answer_ids[0]

        deleted = await answer_repository.delete_answer(EntityId(str(target)))

        assert deleted == target
        with pytest.raises(NotFoundError):
            await answer_repository.get_answer(EntityId(str(target)))

        remaining = await answer_repository.get_answers(EntityId(str(created_question_id)))
        assert [a.id for a in remaining] == [created_answer_ids[1]]
        assert (await question_repository.get_question(EntityId(str(created_question_id)))).id == created_question_id

    async def test_unknown_id_is_not_found(self, answer_repository):
        with pytest.raises(NotFoundError):
            await answer_repository.delete_answer(EntityId(str(uuid.uuid4())))

    async def test_unavailable_store_is_access_error(self, unavailable_session_factory):
        repo = AnswerRepository(unavailable_session_factory)

        with pytest.raises(AccessError):
            await repo.delete_answer(EntityId(str(uuid.uuid4())))


@pytest.mark.asyncio
class TestIncrementAnswerLikes:

    async def test_each_call_adds_one(self, answer_repository, created_answer_ids):
        answer_id = EntityId(str(created_answer_ids[0]))

        await answer_repository.increment_answer_likes(answer_id)
        await answer_repository.increment_answer_likes(answer_id)

        assert (await answer_repository.get_answer(answer_id)).likes == 2
        assert (await answer_repository.get_answer(EntityId(str(created_answer_ids[1])))).likes == 0

    async def test_concurrent_increments_are_not_lost(self, answer_repository, created_answer_ids):
        answer_id = EntityId(str(created_answer_ids[0]))

        await asyncio.gather(*(answer_repository.increment_answer_likes(answer_id) for _ in range(10)))

        assert (await answer_repository.get_answer(answer_id)).likes == 10

    async def test_unknown_id_is_not_found(self, answer_repository):
        with pytest.raises(NotFoundError):
            await answer_repository.increment_answer_likes(EntityId(str(uuid.uuid4())))

    async def test_malformed_id_issues_no_statement(self, answer_repository, executed_statements):
        with pytest.raises(InvalidUuidError):
            await answer_repository.increment_answer_likes(EntityId(""))

        assert executed_statements == []

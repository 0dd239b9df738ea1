"""
Base repository class providing the operations shared by questions and answers.

A repository is bound to:
  - an ORM table (`model`), used to build statements;
  - a pydantic record type (`entity`), which every fetched row is mapped into;
  - an `async_sessionmaker`, the shared pool handle.

Each public operation opens its own session and closes it before returning, so a
repository instance can be shared by any number of concurrent callers.

Error classification rule used throughout:
  - single-row fetch (get, and the locking read inside delete/increment):
    zero rows or a failed statement -> NotFoundError
  - bulk read or transaction begin fails -> AccessError
  - insert fails -> CreationError
  - the write of a read-modify-write fails -> DeletionError / UpdateError
  - the final commit fails -> CommitError
"""
from qa_dao.exceptions.base import (
    DbError,
    AccessError,
    CommitError,
    CreationError,
    DeletionError,
    FromRowError,
    InvalidUuidError,
    NotFoundError,
    UpdateError,
)
from qa_dao.exceptions.mapper import db_error_handler
from qa_dao.schemas.identifiers import EntityId

import time
import logging
from contextlib import asynccontextmanager
from typing import TypeVar, Generic, Type, Any, AsyncIterator
from uuid import UUID

from pydantic import BaseModel, ValidationError
from sqlalchemy import select, insert, update, delete
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from qa_dao.database.base import Base

ModelType = TypeVar("ModelType", bound=Base)
EntityType = TypeVar("EntityType", bound=BaseModel)

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class BaseRepository(Generic[ModelType, EntityType]):
    """
    Generic repository over one table.

    Type Parameters:
        ModelType: the SQLAlchemy table mapping.
        EntityType: the pydantic record rows are mapped into. Every field of the
            record must be a column of the table.
    """

    def __init__(
        self,
        model: Type[ModelType],
        entity: Type[EntityType],
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.model = model
        self.entity = entity
        self.session_factory = session_factory
        # select exactly the columns the record declares, in declaration order
        self._columns = tuple(getattr(model, name) for name in entity.model_fields)

    @property
    def model_name(self) -> str:
        return self.entity.__name__

    # =================================================================================================================
    # Helpers
    # =================================================================================================================

    def _resolve(self, entity_id: EntityId, operation: str) -> UUID:
        try:
            return entity_id.to_uuid()
        except InvalidUuidError:
            # INFO: malformed client input, no stack trace
            logger.info(
                f"repo.{operation}.invalid_uuid",
                extra={"model": self.model_name, "operation": operation},
            )
            raise

    def _to_entity(self, row: Row) -> EntityType:
        """Map one row into the record type, or raise FromRowError."""
        try:
            return self.entity.model_validate(dict(row._mapping))
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
            logger.error(
                "repo.from_row.failed",
                extra={"model": self.model_name, "fields": fields, "error_count": exc.error_count()},
            )
            raise FromRowError(f"Failed to map {self.model_name} row", fields=fields) from exc

    @asynccontextmanager
    async def transaction(
        self,
        operation: str,
        begin_error: Type[DbError] = AccessError,
    ) -> AsyncIterator[AsyncSession]:
        """
        Scoped transaction: begin, yield the session, commit on normal exit.

        A connection is acquired eagerly so an unavailable store fails here with
        `begin_error` rather than at the first statement. If the body raises, the
        transaction is never committed; closing the session rolls it back.
        """
        async with self.session_factory() as session:
            with db_error_handler(begin_error, self.model_name, operation,
                                  message=f"Failed to begin transaction for {self.model_name}"):
                await session.begin()
                await session.connection()

            yield session

            with db_error_handler(CommitError, self.model_name, operation,
                                  message=f"Failed to commit {operation} of {self.model_name}"):
                await session.commit()

    async def _fetch_for_update(self, session: AsyncSession, entity_id: UUID, operation: str, *columns) -> Row:
        """
        Read the target row with a row lock held until the transaction ends.

        Concurrent read-modify-write sequences on the same id queue up behind the
        lock instead of reading the same value.
        """
        query = (
            select(*(columns or (self.model.id,)))
            .where(self.model.id == entity_id)
            .with_for_update()
        )
        with db_error_handler(NotFoundError, self.model_name, operation,
                              message=f"{self.model_name} could not be retrieved"):
            result = await session.execute(query)
            row = result.first()

        if row is None:
            logger.info(
                f"repo.{operation}.not_found",
                extra={"model": self.model_name, "operation": operation, "id": str(entity_id)},
            )
            raise NotFoundError(f"{self.model_name} with ID {entity_id} not found")
        return row

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **values: Any) -> UUID:
        """
        Insert one row and return the generated id.

        Raises:
            CreationError: the insert could not execute (constraint violation,
                store unavailable).
            CommitError: the insert succeeded but the commit failed.
        """
        logger.debug(
            "repo.create.start",
            extra={
                "model": self.model_name,
                "operation": "create",
                # keys only, values may be user content
                "provided_keys": sorted(values.keys()),
            },
        )
        start = time.perf_counter()

        stmt = insert(self.model).values(**values).returning(self.model.id)
        async with self.transaction("create", begin_error=CreationError) as session:
            with db_error_handler(CreationError, self.model_name, "create",
                                  message=f"Failed to create {self.model_name}"):
                result = await session.execute(stmt)
                new_id = result.scalar_one()

        logger.info(
            "repo.create.success",
            extra={
                "model": self.model_name,
                "operation": "create",
                "id": str(new_id),
                "duration_ms": _elapsed_ms(start),
            },
        )
        return new_id

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_by_id(self, entity_id: EntityId) -> EntityType:
        """
        Fetch one record.

        Raises:
            InvalidUuidError: `entity_id` is not a canonical UUID.
            NotFoundError: no such row, or the query failed.
            FromRowError: the row could not be mapped.
        """
        uid = self._resolve(entity_id, "get_by_id")

        query = select(*self._columns).where(self.model.id == uid)
        with db_error_handler(NotFoundError, self.model_name, "get_by_id",
                              message=f"{self.model_name} could not be retrieved"):
            async with self.session_factory() as session:
                result = await session.execute(query)
                row = result.first()

        if row is None:
            logger.info(
                "repo.get_by_id.not_found",
                extra={"model": self.model_name, "operation": "get_by_id", "id": str(uid)},
            )
            raise NotFoundError(f"{self.model_name} with ID {uid} not found")

        logger.debug(f"Retrieved {self.model_name} by ID: {uid}")
        return self._to_entity(row)

    async def get_all(self, *criteria: Any) -> list[EntityType]:
        """
        Fetch every record matching `criteria` (all rows when none), newest first.

        Returns an empty list when nothing matches. A single unmappable row fails
        the whole call with FromRowError; rows are never silently dropped.

        Raises:
            AccessError: the query could not execute.
            FromRowError: a row could not be mapped.
        """
        query = select(*self._columns)
        if criteria:
            query = query.where(*criteria)
        query = query.order_by(self.model.created_at.desc(), self.model.id)

        with db_error_handler(AccessError, self.model_name, "get_all",
                              message=f"Failed to retrieve {self.model_name} records"):
            async with self.session_factory() as session:
                result = await session.execute(query)
                rows = result.all()

        entities = [self._to_entity(row) for row in rows]
        logger.debug(f"Retrieved {len(entities)} {self.model_name} records")
        return entities

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, entity_id: EntityId) -> UUID:
        """
        Delete one row inside a transaction and return its id.

        Steps: lock the row (NotFoundError if absent), delete it (DeletionError),
        commit (CommitError). Begin failure is AccessError.
        """
        uid = self._resolve(entity_id, "delete")
        start = time.perf_counter()

        stmt = (
            delete(self.model)
            .where(self.model.id == uid)
            .returning(self.model.id)
            .execution_options(synchronize_session=False)
        )
        async with self.transaction("delete") as session:
            await self._fetch_for_update(session, uid, "delete")

            with db_error_handler(DeletionError, self.model_name, "delete",
                                  message=f"Failed to delete {self.model_name}"):
                result = await session.execute(stmt)
                deleted_id = result.scalar_one_or_none()

            if deleted_id is None:
                raise DeletionError(f"Failed to delete {self.model_name} with ID {uid}")

        logger.info(
            "repo.delete.success",
            extra={
                "model": self.model_name,
                "operation": "delete",
                "id": str(deleted_id),
                "duration_ms": _elapsed_ms(start),
            },
        )
        return deleted_id

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def increment_likes(self, entity_id: EntityId) -> None:
        """
        Add one like inside a transaction.

        Steps: read `likes` with a row lock (NotFoundError if absent), write back
        `likes + 1` (UpdateError), commit (CommitError). Begin failure is AccessError.
        """
        uid = self._resolve(entity_id, "increment_likes")
        start = time.perf_counter()

        async with self.transaction("increment_likes") as session:
            row = await self._fetch_for_update(session, uid, "increment_likes", self.model.likes)
            likes = row.likes + 1

            stmt = (
                update(self.model)
                .where(self.model.id == uid)
                .values(likes=likes)
                .execution_options(synchronize_session=False)
            )
            with db_error_handler(UpdateError, self.model_name, "increment_likes",
                                  message=f"Failed to update likes of {self.model_name}"):
                await session.execute(stmt)

        logger.info(
            "repo.increment_likes.success",
            extra={
                "model": self.model_name,
                "operation": "increment_likes",
                "id": str(uid),
                "likes": likes,
                "duration_ms": _elapsed_ms(start),
            },
        )

"""SQLAlchemy link session repository.

``replace`` is one ``UPDATE ... WHERE link_id = :id AND version = :expected``;
the row count decides the winner, so it holds across processes sharing the database.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from wallet_link.exceptions import StorageError
from wallet_link.models.link_session import LinkSession
from wallet_link.persistence.repositories.interfaces.link_session_repository import (
    ILinkSessionRepository,
)
from wallet_link.persistence.repositories.sql.converters import (
    session_columns,
    session_model_to_entity,
    to_db_datetime,
)
from wallet_link.persistence.repositories.sql.models import LinkSessionModel


class SqlLinkSessionRepository(ILinkSessionRepository):
    """SQLAlchemy implementation of ILinkSessionRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, link_id: str) -> LinkSession | None:
        try:
            async with self._session_factory() as db:
                model = await db.get(LinkSessionModel, link_id)
                return session_model_to_entity(model) if model is not None else None
        except DBAPIError as e:
            raise StorageError("failed to load session", cause=e) from e

    async def add(self, session: LinkSession) -> None:
        try:
            async with self._session_factory() as db:
                db.add(LinkSessionModel(**session_columns(session)))
                await db.commit()
        except IntegrityError:
            raise ValueError(f"session {session.link_id!r} already exists") from None
        except DBAPIError as e:
            raise StorageError("failed to insert session", cause=e) from e

    async def replace(self, session: LinkSession, expected_version: int) -> bool:
        values = session_columns(session)
        values.pop("link_id")
        stmt = (
            update(LinkSessionModel)
            .where(
                LinkSessionModel.link_id == session.link_id,
                LinkSessionModel.version == expected_version,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
                return result.rowcount == 1  # type: ignore[attr-defined]
        except DBAPIError as e:
            raise StorageError("failed to update session", cause=e) from e

    async def delete(self, link_id: str) -> bool:
        stmt = delete(LinkSessionModel).where(LinkSessionModel.link_id == link_id)
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
                return result.rowcount > 0  # type: ignore[attr-defined]
        except DBAPIError as e:
            raise StorageError("failed to delete session", cause=e) from e

    async def list_all(self) -> list[LinkSession]:
        stmt = select(LinkSessionModel).order_by(
            LinkSessionModel.created_at.desc(),
            LinkSessionModel.link_id.desc(),
        )
        try:
            async with self._session_factory() as db:
                rows = (await db.scalars(stmt)).all()
                return [session_model_to_entity(m) for m in rows]
        except DBAPIError as e:
            raise StorageError("failed to list sessions", cause=e) from e

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(LinkSessionModel).where(LinkSessionModel.expires_at <= to_db_datetime(now))
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
                return int(result.rowcount or 0)  # type: ignore[attr-defined]
        except DBAPIError as e:
            raise StorageError("failed to purge expired sessions", cause=e) from e

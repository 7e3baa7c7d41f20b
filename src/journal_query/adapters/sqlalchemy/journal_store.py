"""SQLAlchemy adapter – SQLAlchemyJournalStore.

Schema (created by :meth:`SQLAlchemyJournalStore.create_tables`; migrations
are the application's business)::

    journal    (ordering PK autoincrement, persistence_id, sequence_number,
                deleted, manifest, message)
    event_tag  (ordering → journal.ordering, tag)

``(persistence_id, sequence_number)`` is unique. ``ordering`` comes from the
database's autoincrement, so concurrent writers can commit out of order and
rolled-back inserts leave permanent holes; the ordering frontier tracker
handles both.
"""
from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterable
from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Integer,
    LargeBinary,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    func,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from journal_query.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from journal_query.application.query.event_adapters import EventAdapters
from journal_query.application.query.read_journal import ReadJournal
from journal_query.application.query.records import StoredRecord
from journal_query.application.query.serialization import JsonSerializer, Serializer
from journal_query.application.query.store import JournalStore, RecordResult
from journal_query.config.settings import ReadJournalSettings
from journal_query.config.validation import MissingRequiredSettingError
from journal_query.kernel.errors import DeserializationError, JournalStoreError
from journal_query.kernel.types import Err, Ok

journal_metadata = MetaData()

journal_table = Table(
    "journal",
    journal_metadata,
    Column(
        "ordering",
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    ),
    Column("persistence_id", String(255), nullable=False),
    Column("sequence_number", BigInteger, nullable=False),
    Column("deleted", Boolean, nullable=False, default=False),
    Column("manifest", String(255), nullable=False, default=""),
    Column("message", LargeBinary, nullable=False),
    UniqueConstraint(
        "persistence_id",
        "sequence_number",
        name="uq_journal_persistence_id_sequence_number",
    ),
)

event_tag_table = Table(
    "event_tag",
    journal_metadata,
    Column(
        "ordering",
        BigInteger().with_variant(Integer, "sqlite"),
        ForeignKey("journal.ordering", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("tag", String(255), primary_key=True),
)


class SQLAlchemyJournalStore(JournalStore):
    """Read-only :class:`JournalStore` over the ``journal``/``event_tag`` tables.

    Every read opens its own session from *session_factory*, so the store can
    be shared by any number of concurrent streams. Driver errors are raised
    as :class:`JournalStoreError`; undecodable payloads are yielded as
    ``Err(DeserializationError)``. Rows flagged ``deleted`` are never read.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        serializer: Serializer | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._serializer = serializer or JsonSerializer()

    @staticmethod
    async def create_tables(bind: AsyncEngine) -> None:
        """Create ``journal`` and ``event_tag`` if they do not exist."""
        async with bind.begin() as conn:
            await conn.run_sync(journal_metadata.create_all)

    # ------------------------------------------------------------------
    # JournalStore interface
    # ------------------------------------------------------------------

    async def records_for(
        self,
        persistence_id: str,
        from_sequence_nr: int,
        to_sequence_nr: int,
        max_results: int,
    ) -> AsyncIterator[RecordResult]:
        j = journal_table.c
        stmt = (
            select(journal_table)
            .where(j.persistence_id == persistence_id)
            .where(j.deleted == False)  # noqa: E712
            .where(j.sequence_number >= from_sequence_nr)
            .where(j.sequence_number <= to_sequence_nr)
            .order_by(j.sequence_number)
            .limit(max_results)
        )
        rows, tags = await self._fetch_with_tags("records_for", stmt)
        for row in rows:
            yield self._decode(row, tags.get(row.ordering, ()))

    async def records_by_tag(
        self,
        tag: str,
        from_ordering: int,
        to_ordering: int,
        max_results: int,
    ) -> AsyncIterator[RecordResult]:
        j = journal_table.c
        stmt = (
            select(journal_table)
            .join(event_tag_table, event_tag_table.c.ordering == j.ordering)
            .where(event_tag_table.c.tag == tag)
            .where(j.deleted == False)  # noqa: E712
            .where(j.ordering > from_ordering)
            .where(j.ordering <= to_ordering)
            .order_by(j.ordering)
            .limit(max_results)
        )
        rows, tags = await self._fetch_with_tags("records_by_tag", stmt)
        for row in rows:
            yield self._decode(row, tags.get(row.ordering, ()))

    async def all_persistence_ids(self, limit: int | None = None) -> AsyncIterator[str]:
        j = journal_table.c
        stmt = (
            select(j.persistence_id)
            .where(j.deleted == False)  # noqa: E712
            .distinct()
            .order_by(j.persistence_id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        for row in await self._fetch("all_persistence_ids", stmt):
            yield row.persistence_id

    async def max_committed_ordering(self) -> int:
        rows = await self._fetch(
            "max_committed_ordering",
            select(func.coalesce(func.max(journal_table.c.ordering), 0).label("max_ordering")),
        )
        return int(rows[0].max_ordering)

    async def ordering_ids(self, after: int, limit: int) -> list[int]:
        j = journal_table.c
        stmt = select(j.ordering).where(j.ordering > after).order_by(j.ordering).limit(limit)
        return [int(row.ordering) for row in await self._fetch("ordering_ids", stmt)]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch(self, operation: str, stmt: Any) -> list[Any]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.fetchall())
        except SQLAlchemyError as exc:
            raise JournalStoreError(operation, cause=exc) from exc

    async def _fetch_with_tags(
        self, operation: str, stmt: Any
    ) -> tuple[list[Any], dict[int, set[str]]]:
        try:
            async with self._session_factory() as session:
                rows = list((await session.execute(stmt)).fetchall())
                tags: dict[int, set[str]] = {}
                if rows:
                    tag_rows = await session.execute(
                        select(event_tag_table).where(
                            event_tag_table.c.ordering.in_([row.ordering for row in rows])
                        )
                    )
                    for tag_row in tag_rows:
                        tags.setdefault(tag_row.ordering, set()).add(tag_row.tag)
                return rows, tags
        except SQLAlchemyError as exc:
            raise JournalStoreError(operation, cause=exc) from exc

    def _decode(self, row: Any, tags: Iterable[str]) -> RecordResult:
        try:
            payload = self._serializer.deserialize(bytes(row.message), row.manifest)
        except Exception as exc:  # noqa: BLE001 – any decoder failure fails this element only
            return Err(
                DeserializationError(
                    row.persistence_id,
                    row.sequence_number,
                    manifest=row.manifest,
                    cause=exc,
                )
            )
        return Ok(
            StoredRecord(
                persistence_id=row.persistence_id,
                sequence_nr=row.sequence_number,
                ordering=row.ordering,
                payload=payload,
                manifest=row.manifest,
                tags=frozenset(tags),
            )
        )


def create_read_journal(
    settings: ReadJournalSettings,
    *,
    serializer: Serializer | None = None,
    adapters: EventAdapters | None = None,
    **engine_kwargs: Any,
) -> tuple[ReadJournal, SqlAlchemySessionFactory]:
    """Build a :class:`ReadJournal` over ``settings.database_url``.

    Returns the journal and the session factory; dispose of the latter on
    shutdown.
    """
    if not settings.database_url:
        raise MissingRequiredSettingError(f"{settings._prefix}_DATABASE_URL")
    sessions = SqlAlchemySessionFactory(settings.database_url, **engine_kwargs)
    store = SQLAlchemyJournalStore(sessions, serializer)
    return ReadJournal(store, settings, adapters=adapters), sessions


__all__ = [
    "SQLAlchemyJournalStore",
    "create_read_journal",
    "event_tag_table",
    "journal_metadata",
    "journal_table",
]

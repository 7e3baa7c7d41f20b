"""SQLAlchemy adapter – session factory, journal schema and journal store."""
from journal_query.adapters.sqlalchemy.journal_store import (
    SQLAlchemyJournalStore,
    create_read_journal,
    event_tag_table,
    journal_metadata,
    journal_table,
)
from journal_query.adapters.sqlalchemy.session import SqlAlchemySessionFactory

__all__ = [
    "SQLAlchemyJournalStore",
    "SqlAlchemySessionFactory",
    "create_read_journal",
    "event_tag_table",
    "journal_metadata",
    "journal_table",
]

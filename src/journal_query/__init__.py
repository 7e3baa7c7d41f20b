"""
journal_query – resumable, live-updating streams over an append-only event journal.

Import path convention::

    from journal_query.application.query import ReadJournal, InMemoryJournalStore
    from journal_query.config.settings import ReadJournalSettings
    from journal_query.adapters.sqlalchemy import SQLAlchemyJournalStore
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

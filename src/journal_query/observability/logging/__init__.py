"""Observability – structlog configuration and logger helper."""
from journal_query.observability.logging.factory import JsonLoggerFactory
from journal_query.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]

"""Core configuration, database session, security and error types."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.errors import ErrorKind, LedgerError

__all__ = ["ErrorKind", "LedgerError", "get_db", "get_settings", "settings"]

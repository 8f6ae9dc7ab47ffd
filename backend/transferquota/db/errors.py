"""Exceptions treated as "storage unavailable" by services that own their sessions."""

from sqlalchemy.exc import SQLAlchemyError

from transferquota.core.exceptions import StorageUnavailableError

STORAGE_ERRORS = (SQLAlchemyError, OSError, StorageUnavailableError)

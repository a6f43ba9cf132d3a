"""
Database Exception Classes for Keep-Alive Bot

Provides specialized exceptions for database-related errors
including connection issues, query errors, and uniqueness violations.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from exceptions.base import KeepAliveBotException


class DatabaseException(KeepAliveBotException):
    """
    Base Database Exception

    Parent class for all database-related exceptions.
    """

    default_error_code = 2000
    default_recoverable = True

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        table: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize database exception.

        Args:
            message: Error message
            query: The SQL query that caused the error (sanitized)
            table: The database table involved
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)

        if query:
            self.details["query"] = self._sanitize_query(query)

        if table:
            self.details["table"] = table

    @staticmethod
    def _sanitize_query(query: str) -> str:
        """Strip literal values out of a SQL statement before it is logged."""
        query = re.sub(r"'[^']*'", "'***'", query)
        query = re.sub(r"= \d+", "= ***", query)

        if len(query) > 500:
            query = query[:500] + "..."

        return query

    def user_message(self) -> str:
        return "Database error. Please try again later."


class DatabaseConnectionError(DatabaseException):
    """
    Database Connection Error

    Raised when unable to establish or maintain database connection.
    Fatal at startup, transient afterwards.
    """

    default_error_code = 2001

    def __init__(
        self,
        message: str = "Unable to connect to database",
        url: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if url:
            self.details["url"] = url

    def user_message(self) -> str:
        return "Unable to access the database. Please try again later."


class DatabaseQueryError(DatabaseException):
    """
    Database Query Error

    Raised when a statement fails to execute or a transaction fails to commit.
    """

    default_error_code = 2002


class DatabaseDuplicateError(DatabaseQueryError):
    """
    Database Duplicate Error

    Raised when an insert violates a unique constraint
    (bot name, admin Telegram ID).
    """

    default_error_code = 2003

    def user_message(self) -> str:
        return "This record already exists."

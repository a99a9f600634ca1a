"""
Database connection management for MySQL Stream Dumper.
"""

import logging
from typing import Any, Iterator, Optional

import mysql.connector
from mysql.connector import Error as MySQLError
from mysql.connector import errorcode
from mysql.connector.conversion import MySQLConverter

from .errors import TransportError
from .models import ColumnInfo


class DatabaseConnection:
    """Manages a MySQL connection and the metadata queries the dumper needs."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None,
        connection_timeout: Optional[int] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection_timeout = connection_timeout
        self.connection = None
        self._converter = MySQLConverter()

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        options = {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': self.database,
            'charset': self.DEFAULT_CHARSET,
            'use_unicode': True,
            # Lets an abandoned streaming cursor be closed without "Unread result found"
            'consume_results': True,
        }
        if self.connection_timeout is not None:
            options['connection_timeout'] = self.connection_timeout

        try:
            self.connection = mysql.connector.connect(**options)
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise TransportError(f"Failed to connect to {self.host}:{self.port}: {e}") from e

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        logging.debug(f"Query: {query} {params or ''}")
        try:
            cursor = self.connection.cursor()
            try:
                cursor.execute(query, params)
                return cursor.fetchall()
            finally:
                cursor.close()
        except MySQLError as e:
            raise TransportError(f"Query failed: {e}") from e

    def stream_rows(self, query: str) -> Iterator[dict[str, Any]]:
        """Stream the rows of a SELECT one by one as column -> value mappings.

        Uses an unbuffered cursor so the result set is never held client-side.
        The cursor is closed when the iterator is exhausted or closed early.
        """
        logging.debug(f"Streaming query: {query}")
        try:
            cursor = self.connection.cursor(buffered=False, dictionary=True)
        except MySQLError as e:
            raise TransportError(f"Could not open cursor: {e}") from e

        try:
            cursor.execute(query)
            for row in cursor:
                yield row
        except MySQLError as e:
            raise TransportError(f"Streaming query failed: {e}") from e
        finally:
            try:
                cursor.close()
            except MySQLError as e:
                logging.debug(f"Error while closing cursor: {e}")

    def escape(self, value: str) -> str:
        """Escape a string and wrap it in single quotes as a SQL literal."""
        return f"'{self._converter.escape(value)}'"

    def current_database(self) -> Optional[str]:
        """Get the name of the currently selected schema."""
        results = self.execute_query("SELECT DATABASE()")
        return results[0][0] if results else None

    def get_catalog_entries(self, database: str) -> list[tuple[str, str]]:
        """Get (TABLE_TYPE, TABLE_NAME) pairs for a schema ordered by name."""
        query = (
            "SELECT TABLE_TYPE, TABLE_NAME FROM information_schema.TABLES "
            "WHERE TABLE_SCHEMA = %s "
            "ORDER BY TABLE_SCHEMA ASC, TABLE_NAME ASC"
        )
        return [(row[0], row[1]) for row in self.execute_query(query, (database,))]

    def get_table_columns(self, table: str) -> list[ColumnInfo]:
        """Get column information for a table."""
        results = self.execute_query(f"DESCRIBE `{table}`")
        return [
            ColumnInfo(
                name=row[0],
                type=row[1],
                nullable=row[2],
                key=row[3],
                default=row[4],
                extra=row[5]
            )
            for row in results
        ]

    def get_create_statement(self, name: str) -> str:
        """Get the CREATE TABLE or CREATE VIEW statement of an object.

        Returns an empty string when the server has nothing usable, including
        views that reference tables or columns which no longer exist.
        """
        try:
            results = self.execute_query(f"SHOW CREATE TABLE `{name}`")
        except TransportError as e:
            if getattr(e.__cause__, 'errno', None) == errorcode.ER_VIEW_INVALID:
                logging.debug(f"View '{name}' is invalid: {e}")
                return ''
            raise
        if not results or len(results[0]) < 2:
            return ''
        return results[0][1] or ''

"""
Row batching for MySQL Stream Dumper.
"""

import json
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Iterator

from .connection import DatabaseConnection
from .models import CatalogObject, ColumnInfo, Fragment, FragmentKind, TableSettings


class RowBatcher:
    """Streams the rows of a table as batched INSERT statements."""

    DEFAULT_CHUNK_SIZE = 1000

    def __init__(self, connection: DatabaseConnection, max_chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.connection = connection
        self.max_chunk_size = max_chunk_size

        # Pre-build type formatters for faster dispatch
        self._type_formatters: dict[type, callable] = {
            type(None): lambda v: 'NULL',
            bool: lambda v: '1' if v else '0',
            int: str,
            float: str,
            Decimal: str,
            bytes: lambda v: f"X'{v.hex()}'",
            bytearray: lambda v: f"X'{v.hex()}'",
            timedelta: self._format_time,
            set: self._format_set,
            frozenset: self._format_set,
        }

    def iter_batches(
        self,
        obj: CatalogObject,
        settings: TableSettings,
        include_generated: bool = False
    ) -> Iterator[Fragment]:
        """
        Yield the data fragments of one table.

        At most `max_chunk_size` rows are held at any time. A table without
        matching rows yields nothing.
        """
        columns = self._select_columns(
            self.connection.get_table_columns(obj.name), settings, include_generated
        )
        if not columns:
            logging.warning(f"No exportable columns in '{obj.name}', skipping its data")
            return

        query = self._build_select_query(obj.name, columns, settings)
        logging.debug(f"Dumping data of '{obj.name}' with query: {query[:200]}")

        batch = []
        for row in self.connection.stream_rows(query):
            batch.append(row)
            if len(batch) >= self.max_chunk_size:
                yield self._build_fragment(obj, batch)
                batch = []

        # Remaining rows
        if batch:
            yield self._build_fragment(obj, batch)

    def _select_columns(
        self,
        columns: list[ColumnInfo],
        settings: TableSettings,
        include_generated: bool
    ) -> list[str]:
        """Column names to export after exclusions."""
        return [
            col.name for col in columns
            if col.name not in settings.exclude_columns
            and (include_generated or not col.is_generated)
        ]

    def _build_select_query(
        self,
        table: str,
        columns: list[str],
        settings: TableSettings
    ) -> str:
        """Build SELECT query with options."""
        quoted_columns = ', '.join(f'`{col}`' for col in columns)
        query = f"SELECT {quoted_columns} FROM `{table}` WHERE 1"

        if settings.where_clause:
            query += f" AND ({settings.where_clause})"

        if settings.order_by:
            query += f" ORDER BY {settings.order_by}"

        return query

    def _build_fragment(self, obj: CatalogObject, rows: list[dict[str, Any]]) -> Fragment:
        return Fragment(
            obj=obj,
            kind=FragmentKind.DATA,
            text=self.build_insert(obj.name, rows),
            row_count=len(rows)
        )

    def build_insert(self, table: str, rows: list[dict[str, Any]]) -> str:
        """Render rows as one INSERT statement, columns taken from the first row."""
        if not rows:
            return ''

        columns = ', '.join(f'`{col}`' for col in rows[0])
        values = ',\n'.join(self.format_row(row) for row in rows)
        return f"INSERT INTO `{table}` ({columns}) VALUES\n{values};\n\n"

    def format_row(self, row: dict[str, Any]) -> str:
        return '(' + ', '.join(self._format_sql_value(value) for value in row.values()) + ')'

    def _format_sql_value(self, value: Any) -> str:
        """Format a value for SQL INSERT statement.

        Uses type-based dispatch for common types to avoid isinstance() overhead.
        """
        # Fast path: direct type lookup
        formatter = self._type_formatters.get(type(value))
        if formatter:
            return formatter(value)

        if isinstance(value, (dict, list)):
            text = json.dumps(value, separators=(',', ':'), ensure_ascii=False)
        else:
            text = str(value)

        return self._quote(text)

    def _quote(self, text: str) -> str:
        # Double quotes need no escaping inside single-quoted literals
        return self.connection.escape(text).replace('\\"', '"')

    def _format_set(self, value: Any) -> str:
        """Render a SET column value as its comma-separated member list."""
        return self._quote(','.join(sorted(value)))

    @staticmethod
    def _format_time(value: timedelta) -> str:
        """Render a TIME column value as '[-]HH:MM:SS[.ffffff]'.

        Hours may exceed 24, since TIME covers -838:59:59 to 838:59:59.
        """
        sign = '-' if value < timedelta(0) else ''
        value = abs(value)
        hours, rest = divmod(value.days * 86400 + value.seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
        if value.microseconds:
            text += f".{value.microseconds:06d}"
        return f"'{text}'"

"""
Catalog resolution for MySQL Stream Dumper.
"""

import fnmatch
import logging
import re
from typing import Iterable

from .connection import DatabaseConnection
from .errors import ConfigurationError
from .models import CatalogObject, ObjectKind


class CatalogResolver:
    """Lists the tables and views of a schema that take part in a dump."""

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    def _compile_patterns(self, patterns: Iterable[str]) -> list[tuple[str, re.Pattern]]:
        """
        Pre-compile table name patterns to regex for faster matching.

        Plain names match themselves, fnmatch wildcards ('*_old', 'tmp_*') match groups.
        """
        return [(pattern, re.compile(fnmatch.translate(pattern))) for pattern in sorted(patterns)]

    def _matches(self, name: str, compiled_patterns: list[tuple[str, re.Pattern]]) -> bool:
        for pattern, compiled in compiled_patterns:
            if compiled.match(name):
                logging.debug(f"Object '{name}' matched pattern '{pattern}'")
                return True
        return False

    def resolve(
        self,
        database: str,
        exclude_tables: Iterable[str] = (),
        include_tables: Iterable[str] = ()
    ) -> tuple[list[CatalogObject], list[CatalogObject]]:
        """
        Resolve the objects to dump.

        Args:
            database: Schema to list.
            exclude_tables: Names or patterns of objects to skip.
            include_tables: Names or patterns of the only objects to keep.

        Returns:
            (tables, views), each sorted by name.
        """
        exclude_tables = set(exclude_tables or ())
        include_tables = set(include_tables or ())
        if exclude_tables and include_tables:
            raise ConfigurationError(
                "Wrong configuration! You must choose just one from these settings: "
                "exclude_tables, include_tables"
            )

        entries = self.connection.get_catalog_entries(database)
        original_count = len(entries)

        if exclude_tables:
            compiled = self._compile_patterns(exclude_tables)
            entries = [e for e in entries if not self._matches(e[1], compiled)]
        elif include_tables:
            compiled = self._compile_patterns(include_tables)
            entries = [e for e in entries if self._matches(e[1], compiled)]

        filtered_count = original_count - len(entries)
        if filtered_count > 0:
            logging.info(f"Filtered out {filtered_count} object(s) by table filters")

        tables = []
        views = []
        for table_type, name in entries:
            obj = CatalogObject(name=name, kind=ObjectKind.from_table_type(table_type))
            (views if obj.is_view else tables).append(obj)

        tables.sort(key=lambda o: o.name)
        views.sort(key=lambda o: o.name)
        return tables, views

"""
Fragment sequencing for MySQL Stream Dumper.
"""

import logging
from itertools import chain
from typing import Iterator

from .batcher import RowBatcher
from .catalog import CatalogResolver
from .connection import DatabaseConnection
from .errors import MissingDatabase, SchemaExtractionWarning
from .models import CatalogObject, DumpConfig, Fragment
from .schema import SchemaExtractor
from .utils import log_dry_run_plan


class DumpSequencer:
    """
    Orders the work of a dump: every table, then every view, each one
    contributing its schema fragment followed by its data fragments.

    Fragments are produced on demand, so no more than one fragment and one
    open cursor exist at any time.
    """

    def __init__(self, connection: DatabaseConnection, config: DumpConfig):
        self.connection = connection
        self.config = config
        self.catalog = CatalogResolver(connection)
        self.extractor = SchemaExtractor(connection)
        self.batcher = RowBatcher(connection, config.max_chunk_size)

    def resolve_database(self) -> str:
        """Get the selected schema or fail before anything is dumped."""
        database = self.connection.current_database()
        if not database:
            raise MissingDatabase(
                "You must select a database before doing an export, please execute first: USE dbname;"
            )
        return database

    def fragments(self) -> Iterator[Fragment]:
        """
        Start a dump and return its one-shot fragment iterator.

        The selected schema is checked right away; everything else happens
        while the iterator is consumed.

        Raises:
            MissingDatabase: No schema is selected on the connection.
        """
        database = self.resolve_database()
        return self._generate(database)

    def _generate(self, database: str) -> Iterator[Fragment]:
        config = self.config
        tables, views = self.catalog.resolve(database, config.exclude_tables, config.include_tables)
        logging.info(f"Found {len(tables)} tables and {len(views)} views in '{database}'")

        if config.dry_run:
            log_dry_run_plan(database, tables, views, config)
            return

        if not (config.export_schema or config.export_data or config.export_view_data):
            logging.info("Nothing to export: schema and data export are both disabled")
            return

        logging.info("Exporting:")
        for obj in chain(tables, views):
            logging.info(f" - {obj.name}")
            yield from self._object_fragments(obj, database)

    def _object_fragments(self, obj: CatalogObject, database: str) -> Iterator[Fragment]:
        config = self.config

        if config.export_schema:
            try:
                fragment = self.extractor.extract(obj, database, config.sort_keys)
            except SchemaExtractionWarning as w:
                logging.warning(str(w))
            else:
                yield fragment

        if config.exports_data_for(obj):
            settings = config.table_settings(obj.name)
            logging.debug(
                f"Table '{obj.name}' effective settings: "
                f"exclude_columns={sorted(settings.exclude_columns)}, "
                f"order_by={settings.order_by}, where_clause={settings.where_clause}"
            )
            yield from self.batcher.iter_batches(
                obj, settings, config.export_generated_columns_data
            )

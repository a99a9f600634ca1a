"""
MySQL Stream Dumper
===================
A streaming logical dump of MySQL schemas with support for:
- Schema (DDL) and data (batched INSERT) export
- Table include/exclude filters with wildcards
- Per-table column exclusion, ordering and row filters
- View statement beautification and key sorting
- File, gzip and arbitrary sink destinations
- Text modifiers applied to every fragment
"""

from .batcher import RowBatcher
from .catalog import CatalogResolver
from .config import ConfigLoader
from .connection import DatabaseConnection
from .dumper import MySQLDumper, dump_database, dump_from_config
from .errors import (
    ConfigurationError,
    DumperError,
    MissingDatabase,
    SchemaExtractionWarning,
    TransportError,
)
from .models import (
    CatalogObject,
    ColumnInfo,
    DumpConfig,
    DumpResult,
    DumpStats,
    Fragment,
    FragmentKind,
    ObjectKind,
    ObjectStats,
    TableSettings,
)
from .modifiers import MODIFIERS, add_drop_statements, strip_auto_increment, strip_definer
from .pipeline import DumpStream
from .schema import SchemaExtractor, beautify_create_view, sort_keys
from .sequencer import DumpSequencer
from .utils import format_settings_display, log_dry_run_plan, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Entry points
    "MySQLDumper",
    "dump_database",
    "dump_from_config",
    # Core classes
    "CatalogResolver",
    "ConfigLoader",
    "DatabaseConnection",
    "DumpSequencer",
    "DumpStream",
    "RowBatcher",
    "SchemaExtractor",
    # Models
    "CatalogObject",
    "ColumnInfo",
    "DumpConfig",
    "DumpResult",
    "DumpStats",
    "Fragment",
    "FragmentKind",
    "ObjectKind",
    "ObjectStats",
    "TableSettings",
    # Errors
    "ConfigurationError",
    "DumperError",
    "MissingDatabase",
    "SchemaExtractionWarning",
    "TransportError",
    # Modifiers
    "MODIFIERS",
    "add_drop_statements",
    "strip_auto_increment",
    "strip_definer",
    # Utilities
    "beautify_create_view",
    "format_settings_display",
    "log_dry_run_plan",
    "setup_logging",
    "sort_keys",
]

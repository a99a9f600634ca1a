"""
Utility functions for MySQL Stream Dumper.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import CatalogObject, DumpConfig, TableSettings


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def log_dry_run_plan(
    database: str,
    tables: list[CatalogObject],
    views: list[CatalogObject],
    config: DumpConfig
) -> None:
    """Log what would be dumped in dry-run mode."""
    logging.info(f"DRY RUN - would dump database: {database}")

    parts = []
    if config.export_schema:
        parts.append("schema")
    if config.export_data:
        parts.append("table data")
    if config.export_view_data:
        parts.append("view data")
    logging.info(f"  Exporting: {', '.join(parts) or 'nothing'}")

    for obj in tables + views:
        if not config.exports_data_for(obj):
            logging.info(f"  - {obj.name} ({obj.kind.value})")
            continue

        settings_parts = format_settings_display(config.table_settings(obj.name))
        if settings_parts:
            logging.info(f"  - {obj.name} ({obj.kind.value}, {', '.join(settings_parts)})")
        else:
            logging.info(f"  - {obj.name} ({obj.kind.value}, all rows)")


def format_settings_display(settings: TableSettings) -> list[str]:
    """Format settings for display in dry-run mode."""
    parts = []
    if settings.exclude_columns:
        parts.append(f"exclude={','.join(sorted(settings.exclude_columns))}")
    if settings.order_by:
        parts.append(f"order={settings.order_by}")
    if settings.where_clause:
        parts.append(f"where='{settings.where_clause}'")
    return parts

"""
Data models and enums for MySQL Stream Dumper.
"""

import os
import re
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Optional

from .errors import ConfigurationError
from .modifiers import resolve_modifier

Modifier = Callable[[str], str]

GENERATED_COLUMN_PATTERN = re.compile(r"\b(VIRTUAL|STORED) GENERATED\b", re.IGNORECASE)


class ObjectKind(Enum):
    """Kind of catalog object."""
    TABLE = "table"
    VIEW = "view"

    @classmethod
    def from_table_type(cls, table_type: str) -> "ObjectKind":
        """Map an information_schema TABLE_TYPE value to a kind."""
        return cls.VIEW if table_type == "VIEW" else cls.TABLE


class FragmentKind(Enum):
    """Kind of dump fragment."""
    SCHEMA = "schema"
    DATA = "data"


@dataclass(frozen=True)
class CatalogObject:
    """A table or view selected for the dump."""
    name: str
    kind: ObjectKind

    @property
    def is_view(self) -> bool:
        return self.kind is ObjectKind.VIEW


@dataclass(frozen=True)
class Fragment:
    """One self-contained unit of dump output."""
    obj: CatalogObject
    kind: FragmentKind
    text: str
    row_count: int = 0


@dataclass
class ColumnInfo:
    """Database column metadata."""
    name: str
    type: str
    nullable: str
    key: str
    default: Any
    extra: str

    @property
    def is_generated(self) -> bool:
        return bool(GENERATED_COLUMN_PATTERN.search(self.extra or ""))


@dataclass
class TableSettings:
    """Merged per-table settings for the data export."""
    exclude_columns: frozenset[str] = frozenset()
    order_by: Optional[str] = None
    where_clause: Optional[str] = None


@dataclass
class ObjectStats:
    """Statistics for a single exported object."""
    name: str
    kind: ObjectKind
    schema_exported: bool = False
    rows_dumped: int = 0
    data_fragments: int = 0


@dataclass
class DumpStats:
    """Overall dump statistics."""
    objects: list[ObjectStats] = field(default_factory=list)
    total_objects: int = 0
    total_rows: int = 0
    schema_fragments: int = 0
    data_fragments: int = 0

    def record(self, fragment: Fragment) -> None:
        """Account for a fragment that went downstream."""
        if not self.objects or self.objects[-1].name != fragment.obj.name:
            self.objects.append(ObjectStats(name=fragment.obj.name, kind=fragment.obj.kind))
            self.total_objects += 1
        current = self.objects[-1]

        if fragment.kind is FragmentKind.SCHEMA:
            current.schema_exported = True
            self.schema_fragments += 1
        else:
            current.rows_dumped += fragment.row_count
            current.data_fragments += 1
            self.total_rows += fragment.row_count
            self.data_fragments += 1


@dataclass
class DumpResult:
    """Outcome of a completed dump."""
    stats: DumpStats
    output: Optional[str] = None


@dataclass(frozen=True)
class DumpConfig:
    """Immutable dump options.

    Validated at construction time so that contradicting options never reach
    the database.
    """
    export_schema: bool = True
    export_data: bool = False
    export_view_data: bool = False
    export_generated_columns_data: bool = False
    sort_keys: bool = False
    max_chunk_size: int = 1000
    destination: Any = None
    modifiers: tuple[Modifier, ...] = ()
    exclude_tables: frozenset[str] = frozenset()
    include_tables: frozenset[str] = frozenset()
    exclude_columns: dict[str, frozenset[str]] = field(default_factory=dict)
    order_by: dict[str, str] = field(default_factory=dict)
    filter_rows: dict[str, str] = field(default_factory=dict)
    return_output: bool = False
    compress: bool = False
    dry_run: bool = False

    KEY_ALIASES = {'reorder_columns': 'order_by'}

    def __post_init__(self):
        # Normalize collections so callers may pass lists and plain dicts
        object.__setattr__(self, 'modifiers', tuple(self.modifiers or ()))
        object.__setattr__(self, 'exclude_tables', frozenset(self.exclude_tables or ()))
        object.__setattr__(self, 'include_tables', frozenset(self.include_tables or ()))
        object.__setattr__(self, 'exclude_columns', {
            table: frozenset(columns or ())
            for table, columns in (self.exclude_columns or {}).items()
        })
        object.__setattr__(self, 'order_by', dict(self.order_by or {}))
        object.__setattr__(self, 'filter_rows', dict(self.filter_rows or {}))
        self._validate()

    def _validate(self) -> None:
        if self.include_tables and self.exclude_tables:
            raise ConfigurationError(
                "Wrong configuration! You must choose just one from these settings: "
                "exclude_tables, include_tables"
            )

        if isinstance(self.max_chunk_size, bool) or not isinstance(self.max_chunk_size, int) \
                or self.max_chunk_size < 1:
            raise ConfigurationError(
                f"max_chunk_size must be a positive integer, got {self.max_chunk_size!r}"
            )

        if self.destination is not None and not self.has_destination_path \
                and not hasattr(self.destination, 'write'):
            raise ConfigurationError(
                f"Unsupported destination value ({type(self.destination).__name__}) - "
                f"please use a file path or a writable object"
            )

        for modifier in self.modifiers:
            if not callable(modifier):
                raise ConfigurationError(f"Modifier {modifier!r} is not callable")

    @property
    def has_destination_path(self) -> bool:
        return isinstance(self.destination, (str, os.PathLike))

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> "DumpConfig":
        """
        Create a DumpConfig from a plain mapping, e.g. the `dump` section of a YAML file.

        Modifiers may be given by name and are looked up in the modifier registry.
        """
        known = {f.name for f in fields(cls)}
        settings = {}
        for key, value in (options or {}).items():
            key = cls.KEY_ALIASES.get(key, key)
            if key not in known:
                raise ConfigurationError(f"Unknown dump option '{key}'")
            settings[key] = value

        if 'modifiers' in settings:
            settings['modifiers'] = [
                resolve_modifier(m) if isinstance(m, str) else m
                for m in settings['modifiers'] or []
            ]
        return cls(**settings)

    def table_settings(self, table: str) -> TableSettings:
        """Get the data export settings that apply to one table."""
        return TableSettings(
            exclude_columns=self.exclude_columns.get(table, frozenset()),
            order_by=self.order_by.get(table) or None,
            where_clause=self.filter_rows.get(table) or None,
        )

    def exports_data_for(self, obj: CatalogObject) -> bool:
        """Check whether rows of the object should be dumped."""
        return self.export_view_data if obj.is_view else self.export_data

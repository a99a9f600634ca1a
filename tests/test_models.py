"""
Unit tests for models.py
"""

import io
from pathlib import Path

import pytest

from mysql_stream_dumper.errors import ConfigurationError
from mysql_stream_dumper.models import (
    CatalogObject,
    ColumnInfo,
    DumpConfig,
    ObjectKind,
    TableSettings,
)
from mysql_stream_dumper.modifiers import strip_auto_increment


class TestObjectKind:
    """Tests for ObjectKind enum."""

    def test_from_table_type(self):
        assert ObjectKind.from_table_type("VIEW") is ObjectKind.VIEW
        assert ObjectKind.from_table_type("BASE TABLE") is ObjectKind.TABLE
        assert ObjectKind.from_table_type("SYSTEM VIEW") is ObjectKind.TABLE

    def test_catalog_object_is_view(self):
        assert CatalogObject("v", ObjectKind.VIEW).is_view
        assert not CatalogObject("t", ObjectKind.TABLE).is_view


class TestColumnInfo:
    """Tests for ColumnInfo dataclass."""

    def test_column_info_creation(self):
        col = ColumnInfo(
            name="id",
            type="int(11)",
            nullable="NO",
            key="PRI",
            default=None,
            extra="auto_increment"
        )
        assert col.name == "id"
        assert col.extra == "auto_increment"
        assert col.is_generated is False

    def test_generated_columns(self):
        assert ColumnInfo("a", "int", "YES", "", None, "VIRTUAL GENERATED").is_generated
        assert ColumnInfo("b", "int", "YES", "", None, "STORED GENERATED").is_generated
        assert not ColumnInfo("c", "int", "YES", "", None, None).is_generated

    def test_default_expression_is_not_generated(self):
        col = ColumnInfo("created_at", "timestamp", "YES", "", "CURRENT_TIMESTAMP", "DEFAULT_GENERATED")
        assert not col.is_generated
        col.extra = "DEFAULT_GENERATED on update CURRENT_TIMESTAMP"
        assert not col.is_generated


class TestDumpConfigDefaults:
    """Tests for DumpConfig defaults."""

    def test_defaults(self):
        config = DumpConfig()
        assert config.export_schema is True
        assert config.export_data is False
        assert config.export_view_data is False
        assert config.export_generated_columns_data is False
        assert config.sort_keys is False
        assert config.max_chunk_size == 1000
        assert config.destination is None
        assert config.modifiers == ()
        assert config.exclude_tables == frozenset()
        assert config.include_tables == frozenset()
        assert config.exclude_columns == {}
        assert config.order_by == {}
        assert config.filter_rows == {}
        assert config.return_output is False
        assert config.compress is False
        assert config.dry_run is False

    def test_immutable(self):
        config = DumpConfig()
        with pytest.raises(AttributeError):
            config.export_data = True

    def test_collections_normalized(self):
        config = DumpConfig(
            exclude_tables=["a", "b", "a"],
            exclude_columns={"users": ["password"]},
            modifiers=[strip_auto_increment],
        )
        assert config.exclude_tables == frozenset({"a", "b"})
        assert config.exclude_columns == {"users": frozenset({"password"})}
        assert config.modifiers == (strip_auto_increment,)


class TestDumpConfigValidation:
    """Tests for DumpConfig validation."""

    def test_include_and_exclude_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DumpConfig(include_tables=["orders"], exclude_tables=["orders"])
        assert "exclude_tables, include_tables" in str(exc_info.value)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            DumpConfig(include_tables=["a"], exclude_tables=["b"])

    @pytest.mark.parametrize("size", [0, -1, 1.5, True, "100"])
    def test_invalid_chunk_size(self, size):
        with pytest.raises(ConfigurationError):
            DumpConfig(max_chunk_size=size)

    def test_destination_types(self):
        assert DumpConfig(destination="dump.sql").has_destination_path
        assert DumpConfig(destination=Path("dump.sql")).has_destination_path
        assert not DumpConfig(destination=io.StringIO()).has_destination_path

    def test_unsupported_destination(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DumpConfig(destination=42)
        assert "Unsupported destination" in str(exc_info.value)

    def test_non_callable_modifier(self):
        with pytest.raises(ConfigurationError):
            DumpConfig(modifiers=["not a function"])


class TestDumpConfigFromDict:
    """Tests for DumpConfig.from_dict."""

    def test_from_dict(self):
        config = DumpConfig.from_dict({
            "export_data": True,
            "max_chunk_size": 100,
            "exclude_tables": ["innodb_index_stats"],
            "exclude_columns": {"help_topic": ["example", "description"]},
        })
        assert config.export_data is True
        assert config.max_chunk_size == 100
        assert config.exclude_tables == frozenset({"innodb_index_stats"})
        assert config.exclude_columns["help_topic"] == frozenset({"example", "description"})

    def test_reorder_columns_alias(self):
        config = DumpConfig.from_dict({"reorder_columns": {"users": "id DESC"}})
        assert config.order_by == {"users": "id DESC"}

    def test_modifiers_by_name(self):
        config = DumpConfig.from_dict({"modifiers": ["strip_auto_increment"]})
        assert config.modifiers == (strip_auto_increment,)

    def test_unknown_modifier(self):
        with pytest.raises(ConfigurationError):
            DumpConfig.from_dict({"modifiers": ["shout"]})

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DumpConfig.from_dict({"export_everything": True})
        assert "export_everything" in str(exc_info.value)

    def test_empty(self):
        assert DumpConfig.from_dict({}) == DumpConfig()


class TestTableSettings:
    """Tests for per-table settings."""

    def test_table_settings(self):
        config = DumpConfig(
            exclude_columns={"users": ["password"]},
            order_by={"users": "id DESC"},
            filter_rows={"users": "active = 1"},
        )
        assert config.table_settings("users") == TableSettings(
            exclude_columns=frozenset({"password"}),
            order_by="id DESC",
            where_clause="active = 1",
        )

    def test_table_without_settings(self):
        assert DumpConfig().table_settings("orders") == TableSettings()

    def test_exports_data_for(self):
        table = CatalogObject("t", ObjectKind.TABLE)
        view = CatalogObject("v", ObjectKind.VIEW)

        config = DumpConfig(export_data=True)
        assert config.exports_data_for(table)
        assert not config.exports_data_for(view)

        config = DumpConfig(export_view_data=True)
        assert not config.exports_data_for(table)
        assert config.exports_data_for(view)

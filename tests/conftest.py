"""
Shared fixtures: an in-memory stand-in for the MySQL connection.
"""

import pytest

from mysql_stream_dumper.connection import DatabaseConnection
from mysql_stream_dumper.models import ColumnInfo


class FakeConnection(DatabaseConnection):
    """Serves catalog, columns, DDL and rows from dictionaries.

    Escaping is inherited from DatabaseConnection so rendered values match the
    real driver.
    """

    def __init__(self, database="shop", catalog=None, columns=None, create=None, rows=None):
        super().__init__(host="localhost", port=3306, user="root", password="")
        self.selected_database = database
        self.catalog = catalog or []
        self.columns = columns or {}
        self.create = create or {}
        self.rows = rows or {}
        self.queries = []
        self.open_cursors = 0

    def current_database(self):
        self.queries.append("SELECT DATABASE()")
        return self.selected_database

    def get_catalog_entries(self, database):
        self.queries.append(f"CATALOG {database}")
        return list(self.catalog)

    def get_table_columns(self, table):
        self.queries.append(f"DESCRIBE `{table}`")
        return [
            col if isinstance(col, ColumnInfo) else ColumnInfo(col, "varchar(255)", "YES", "", None, "")
            for col in self.columns.get(table, [])
        ]

    def get_create_statement(self, name):
        self.queries.append(f"SHOW CREATE TABLE `{name}`")
        return self.create.get(name, "")

    def stream_rows(self, query):
        self.queries.append(query)
        table = query.split(" FROM `", 1)[1].split("`", 1)[0]
        self.open_cursors += 1
        try:
            for row in self.rows.get(table, []):
                yield dict(row)
        finally:
            self.open_cursors -= 1


USERS_DDL = (
    "CREATE TABLE `users` (\n"
    "  `id` int NOT NULL AUTO_INCREMENT,\n"
    "  `name` varchar(255) DEFAULT NULL,\n"
    "  PRIMARY KEY (`id`)\n"
    ") ENGINE=InnoDB AUTO_INCREMENT=42 DEFAULT CHARSET=utf8mb4"
)

ORDERS_DDL = (
    "CREATE TABLE `orders` (\n"
    "  `id` int NOT NULL,\n"
    "  `user_id` int NOT NULL,\n"
    "  PRIMARY KEY (`id`)\n"
    ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
)

VIEW_DDL = (
    "CREATE ALGORITHM=UNDEFINED DEFINER=`root`@`localhost` SQL SECURITY DEFINER "
    "VIEW `active_users` AS select `shop`.`users`.`id` AS `id`,`shop`.`users`.`name` AS `name` "
    "from `shop`.`users` where (`shop`.`users`.`id` > 0)"
)


@pytest.fixture
def fake_connection():
    """A schema with two tables and one view."""
    return FakeConnection(
        catalog=[
            ("BASE TABLE", "orders"),
            ("VIEW", "active_users"),
            ("BASE TABLE", "users"),
        ],
        columns={
            "users": ["id", "name"],
            "orders": ["id", "user_id"],
            "active_users": ["id", "name"],
        },
        create={
            "users": USERS_DDL,
            "orders": ORDERS_DDL,
            "active_users": VIEW_DDL,
        },
        rows={
            "users": [{"id": 1, "name": "Ann"}, {"id": 2, "name": "Bob"}],
            "orders": [{"id": 10, "user_id": 1}],
            "active_users": [{"id": 1, "name": "Ann"}],
        },
    )

"""
DDL extraction and normalization for MySQL Stream Dumper.
"""

import logging
import re

from .connection import DatabaseConnection
from .errors import SchemaExtractionWarning
from .models import CatalogObject, Fragment, FragmentKind

VIEW_CLAUSE_PATTERN = re.compile(
    r'(SELECT|FROM|LEFT JOIN|INNER JOIN|OUTER JOIN|RIGHT JOIN|JOIN|WHERE|GROUP BY|ORDER BY|LIMIT) ',
    re.IGNORECASE
)
VIEW_COLUMN_COMMA_PATTERN = re.compile(r'(`,)')
VIEW_CONDITION_PATTERN = re.compile(r'[) ](on|and|or)[ (]')
VIEW_FUNCTION_PATTERN = re.compile(r'([a-z_0-9]+?)\(')

KEY_LINE_PATTERN = re.compile(r'^.+KEY .+$', re.MULTILINE)
PLAIN_KEY = '  KEY'
PLAIN_KEY_PLACEHOLDER = '  W_KEY'


def beautify_create_view(sql: str, database: str) -> str:
    """
    Spread the single-line CREATE VIEW statement returned by MySQL over several lines.

    Clause keywords start their own line, columns get one line each, function
    names are uppercased, and the ALGORITHM/DEFINER/SQL SECURITY options plus
    the schema qualifiers are removed.
    """
    sql = VIEW_CLAUSE_PATTERN.sub(lambda m: '\n' + m.group(1).upper() + '\n  ', sql)
    sql = VIEW_COLUMN_COMMA_PATTERN.sub(r'\1\n  ', sql)
    sql = VIEW_CONDITION_PATTERN.sub(lambda m: m.group(0).upper(), sql)
    sql = VIEW_FUNCTION_PATTERN.sub(lambda m: m.group(0).upper(), sql)
    sql = sql.replace(' ALGORITHM=UNDEFINED', '', 1)
    sql = re.sub(r' DEFINER=`.+?`@`.+?`', '', sql, count=1)
    sql = sql.replace(' SQL SECURITY DEFINER', '', 1)
    return re.sub(re.escape(f'`{database}`') + r'\.', '', sql, flags=re.IGNORECASE)


def sort_keys(schema: str) -> str:
    """
    Reorder the KEY lines of a CREATE TABLE body.

    Primary, unique and other qualified keys come before plain KEY lines. Each
    sorted line takes the slot of an original KEY line and only the last one
    is left without a trailing comma.
    """
    keys = KEY_LINE_PATTERN.findall(schema)
    if not keys:
        return schema

    # Plain indexes are renamed so they sort after every qualified key
    ordered = sorted(k.replace(PLAIN_KEY, PLAIN_KEY_PLACEHOLDER) for k in keys)
    ordered = [k.replace(PLAIN_KEY_PLACEHOLDER, PLAIN_KEY) for k in ordered]
    ordered = [
        k.removesuffix(',') + (',' if i < len(ordered) - 1 else '')
        for i, k in enumerate(ordered)
    ]

    replacements = iter(ordered)
    return KEY_LINE_PATTERN.sub(lambda m: next(replacements), schema)


class SchemaExtractor:
    """Produces the normalized DDL fragment of a table or view."""

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    def extract(self, obj: CatalogObject, database: str, sort_key_lines: bool = False) -> Fragment:
        """
        Build the schema fragment of one catalog object.

        Raises:
            SchemaExtractionWarning: The server returned no create statement.
        """
        statement = self.connection.get_create_statement(obj.name)
        if not statement:
            raise SchemaExtractionWarning(obj.name)

        if obj.is_view:
            statement = beautify_create_view(statement, database)

        output = statement + ';'
        if sort_key_lines:
            output = sort_keys(output)

        logging.debug(f"Extracted schema of {obj.kind.value} '{obj.name}'")
        return Fragment(obj=obj, kind=FragmentKind.SCHEMA, text=output + '\n\n')

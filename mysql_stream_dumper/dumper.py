"""
Entry points of MySQL Stream Dumper.
"""

import logging
from typing import Any, Optional

from .config import ConfigLoader
from .connection import DatabaseConnection
from .models import DumpConfig, DumpResult
from .pipeline import DumpStream
from .sequencer import DumpSequencer
from .utils import setup_logging


class MySQLDumper:
    """
    Dumps the selected schema of an open connection.

    The connection is shared: the dumper never closes it, and it must not be
    used for anything else while a dump is being consumed.
    """

    def __init__(self, connection: DatabaseConnection, config: Optional[DumpConfig] = None):
        self.connection = connection
        self.config = config or DumpConfig()

    def stream(self) -> DumpStream:
        """Create a lazy stream of the dump; nothing runs until it is iterated."""
        return DumpStream(DumpSequencer(self.connection, self.config), self.config)

    def dump(self) -> DumpResult:
        """Run the dump to completion, writing to the configured destination."""
        return self.stream().read()


def dump_database(
    connection_settings: dict[str, Any],
    config: Optional[DumpConfig] = None
) -> DumpResult:
    """
    Connect, dump and disconnect.

    Args:
        connection_settings: host, port, user, password and database of the server.
        config: Dump options, defaults to a schema-only dump.

    Returns:
        DumpResult with statistics and, if return_output is set, the dump text.
    """
    with DatabaseConnection(
        host=connection_settings['host'],
        port=connection_settings.get('port', DatabaseConnection.DEFAULT_PORT),
        user=connection_settings['user'],
        password=connection_settings.get('password', ''),
        database=connection_settings.get('database'),
        connection_timeout=connection_settings.get('connection_timeout')
    ) as conn:
        result = MySQLDumper(conn, config).dump()

    logging.debug(f"Dump of {connection_settings.get('database')} finished")
    return result


def dump_from_config(config_path: str, instance_name: str = 'primary') -> DumpResult:
    """
    Run a dump described by a YAML configuration file.

    Logging is set up from the `logging` section, the server is taken from
    `instances.<instance_name>` and the options from the `dump` section.
    """
    loader = ConfigLoader(config_path)
    setup_logging(loader.get_logging_settings())

    connection_settings = loader.get_instance(instance_name)
    config = loader.get_dump_config()
    logging.info(f"Dumping instance '{instance_name}' ({connection_settings.get('host')})")
    return dump_database(connection_settings, config)

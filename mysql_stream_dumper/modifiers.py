"""
Built-in text modifiers for dump output.

A modifier is any callable taking a fragment of dump text and returning the
transformed text. They are applied in order to every fragment.
"""

import os
import re
from typing import Callable

from .errors import ConfigurationError

AUTO_INCREMENT_PATTERN = re.compile(r' AUTO_INCREMENT=\d+')
DEFINER_PATTERN = re.compile(r' DEFINER=`[^`]*`@`[^`]*`')
CREATE_PATTERN = re.compile(r'^CREATE (TABLE|VIEW) (`[^`]+`)', re.MULTILINE)


def strip_auto_increment(text: str) -> str:
    """Remove the AUTO_INCREMENT counter from CREATE TABLE options."""
    return AUTO_INCREMENT_PATTERN.sub('', text)


def strip_definer(text: str) -> str:
    """Remove DEFINER clauses from views, triggers and routines."""
    return DEFINER_PATTERN.sub('', text)


def add_drop_statements(text: str) -> str:
    """Prefix every CREATE TABLE/VIEW with the matching DROP ... IF EXISTS."""
    return CREATE_PATTERN.sub(
        lambda m: f"DROP {m.group(1)} IF EXISTS {m.group(2)};{os.linesep}{m.group(0)}",
        text
    )


MODIFIERS: dict[str, Callable[[str], str]] = {
    'strip_auto_increment': strip_auto_increment,
    'strip_definer': strip_definer,
    'add_drop_statements': add_drop_statements,
}


def resolve_modifier(name: str) -> Callable[[str], str]:
    """Look up a built-in modifier by name."""
    if name not in MODIFIERS:
        raise ConfigurationError(
            f"Unknown modifier '{name}'. Available: {', '.join(sorted(MODIFIERS))}"
        )
    return MODIFIERS[name]

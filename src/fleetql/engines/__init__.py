"""Execution engines for FleetQL.

Engines implement the ``QueryExecutor`` protocol: they take a compiled
statement and its parameters, run it, and return rows. Query compilers
never execute anything; engines never build SQL.
"""

from fleetql.engines.base import SQLAlchemyExecutor
from fleetql.engines.placeholders import translate_placeholders

__all__ = [
    "SQLAlchemyExecutor",
    "translate_placeholders",
]

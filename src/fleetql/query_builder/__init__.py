"""Query building for FleetQL.

This module turns fluent chains into parameterized SQL. It never talks to
a database itself; compiled statements are handed to an executor.

Architecture:
    - fluent.py: ``QueryBuilder``, the chainable per-table builder
    - base.py: ``BaseQueryCompiler``, validation and shared rendering
    - postgres/: PostgreSQL statements with ``$n`` placeholders
    - compiled.py: ``CompiledQuery`` and the parameter binder
    - factory.py: ``Database`` handle and process-wide ``from_()``

Security:
    Values are always bound as parameters. The strings that must appear
    verbatim (column lists, conflict targets, column names) are checked
    against whitelists, and a failed check raises ``ValidationError``
    before anything reaches the driver.

Example:
    >>> from fleetql.query_builder import Database
    >>> db = Database(executor)
    >>> db.from_("drivers").select("id,name").eq("status", "available").compile()
    CompiledQuery(sql='SELECT id,name FROM drivers WHERE status = $1', params=['available'])
"""

from fleetql.query_builder.base import BaseQueryCompiler
from fleetql.query_builder.compiled import CompiledQuery, ParameterBinder
from fleetql.query_builder.factory import (
    Database,
    DatabaseFactory,
    from_,
    get_database,
    set_database,
)
from fleetql.query_builder.fluent import QueryBuilder
from fleetql.query_builder.postgres import PostgresQueryCompiler

__all__ = [
    "BaseQueryCompiler",
    "PostgresQueryCompiler",
    "CompiledQuery",
    "ParameterBinder",
    "QueryBuilder",
    "Database",
    "DatabaseFactory",
    "get_database",
    "set_database",
    "from_",
]

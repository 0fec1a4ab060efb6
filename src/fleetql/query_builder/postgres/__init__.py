"""PostgreSQL query compiler.

Renders operations as PostgreSQL statements with ``$n`` placeholders, the
parameter style asyncpg and PostgREST-compatible backends expect.

Example:
    from fleetql.query_builder.postgres import PostgresQueryCompiler
    from fleetql.operations import Select
    from fleetql.settings import get_settings

    compiler = PostgresQueryCompiler(get_settings())
    compiled = compiler.build_query(Select(table="drivers", limit=10))
    compiled.sql     # 'SELECT * FROM drivers LIMIT 10'
"""

from fleetql.query_builder.postgres.compiler import PostgresQueryCompiler

__all__ = [
    "PostgresQueryCompiler",
]

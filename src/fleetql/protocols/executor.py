"""Executor protocol definitions.

A fluent builder never talks to a database itself. It hands the compiled
statement to an executor: any object with an async ``query(sql, params)``.
"""

from typing import Any, List, Protocol, Union, runtime_checkable

from fleetql.types.results import DriverResult


@runtime_checkable
class QueryExecutor(Protocol):
    """Protocol for the outbound database primitive.

    Implementations receive SQL with ``$1..$n`` placeholders and the
    matching positional parameters, and return the produced rows. Failures
    are raised; the builder turns them into an error result.
    """

    async def query(self, sql: str, params: List[Any]) -> Union[DriverResult, dict]:
        """Execute one statement.

        Args:
            sql: Statement text with ``$n`` placeholders
            params: Values for the placeholders, ``params[0]`` binds ``$1``

        Returns:
            A DriverResult, or a mapping with a ``rows`` list
        """
        ...

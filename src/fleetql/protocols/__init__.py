"""Protocol definitions for FleetQL.

Protocols describe the contracts FleetQL depends on without requiring
inheritance. They sit at the bottom of the package and import nothing but
the shared result types.
"""

from .executor import QueryExecutor

__all__ = [
    "QueryExecutor",
]

"""SQL and query-related constants.

This module contains the fundamental enums shared by the operation models,
the compilers and the fluent builder.

These constants sit at the bottom of the package so any layer can import
them without creating circular dependencies.
"""

from enum import Enum


class QueryType(str, Enum):
    """Statement kinds a fluent builder can compile to.

    Exactly one is active per builder when it is compiled. ``SELECT`` is the
    default; the write kinds override it and a later ``select()`` never
    reverts them.
    """

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    UPSERT = "UPSERT"


class FilterOperator(str, Enum):
    """Comparison operators accepted in a WHERE condition.

    The value is the literal SQL text rendered between the column and the
    placeholder (or keyword, for ``IS``/``IS NOT``).
    """

    EQ = "="
    NEQ = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    LIKE = "LIKE"
    ILIKE = "ILIKE"
    IS = "IS"
    IS_NOT = "IS NOT"
    IN = "IN"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


# Operands allowed on the right-hand side of IS / IS NOT, rendered as keywords
IS_KEYWORDS = {None: "NULL", True: "TRUE", False: "FALSE"}

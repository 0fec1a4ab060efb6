"""Placeholder translation for DB-API drivers.

Compiled statements always use PostgreSQL-style ``$1..$n`` placeholders.
Drivers that expect another paramstyle get the statement rewritten here,
right before execution, with the parameters reshaped to match.
"""

import re
from typing import Any, Dict, List, Sequence, Tuple, Union

from fleetql.common.exceptions import configuration_error

_DOLLAR_PLACEHOLDER = re.compile(r"\$(\d+)")

BoundParameters = Union[Tuple[Any, ...], Dict[str, Any]]


def _ordered(sql: str, params: Sequence[Any]) -> List[Any]:
    # Positional styles bind by occurrence, so repeat values in text order
    return [params[int(index) - 1] for index in _DOLLAR_PLACEHOLDER.findall(sql)]


def translate_placeholders(
    sql: str,
    params: Sequence[Any],
    paramstyle: str,
) -> Tuple[str, BoundParameters]:
    """Rewrite ``$n`` placeholders for the given DB-API ``paramstyle``.

    Args:
        sql: Statement with ``$1..$n`` placeholders
        params: Positional values, ``params[0]`` binds ``$1``
        paramstyle: The driver's DB-API paramstyle, as reported by
            ``engine.dialect.paramstyle``

    Returns:
        Tuple of (statement, parameters) ready for ``exec_driver_sql``

    Raises:
        FleetQLError: If the paramstyle is not supported
    """
    if paramstyle == "numeric_dollar":
        return sql, tuple(params)

    if paramstyle == "qmark":
        return _DOLLAR_PLACEHOLDER.sub("?", sql), tuple(_ordered(sql, params))

    if paramstyle == "numeric":
        return _DOLLAR_PLACEHOLDER.sub(r":\1", sql), tuple(params)

    if paramstyle == "named":
        return (
            _DOLLAR_PLACEHOLDER.sub(r":p\1", sql),
            {f"p{index}": value for index, value in enumerate(params, start=1)},
        )

    if paramstyle in ("format", "pyformat"):
        # Literal percent signs must be doubled once the driver interpolates
        escaped = sql.replace("%", "%%") if params else sql
        if paramstyle == "format":
            return _DOLLAR_PLACEHOLDER.sub("%s", escaped), tuple(_ordered(sql, params))
        return (
            _DOLLAR_PLACEHOLDER.sub(r"%(p\1)s", escaped),
            {f"p{index}": value for index, value in enumerate(params, start=1)},
        )

    raise configuration_error(
        f"Unsupported driver paramstyle: {paramstyle}",
        config_key="database.url",
    )

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List


@dataclass(frozen=True)
class CompiledQuery:
    """
    Represents the result of the compilation process.
    """
    sql: str
    params: List[Any] = field(default_factory=list)

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield self.params


class ParameterBinder:
    """Collects bound values during one rendering pass.

    Each ``bind()`` appends the value and returns the placeholder for its
    1-based position, so placeholder numbers always follow the order in
    which the renderer visits values.
    """

    def __init__(self, placeholder: Callable[[int], str]):
        self._placeholder = placeholder
        self.params: List[Any] = []

    def bind(self, value: Any) -> str:
        self.params.append(value)
        return self._placeholder(len(self.params))

    def bind_many(self, values: List[Any]) -> List[str]:
        return [self.bind(value) for value in values]

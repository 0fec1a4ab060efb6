"""Base model for FleetQL data structures."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class FleetBaseModel(BaseModel):
    """Pydantic base shared by operations and results.

    Assignments are re-validated, so an operation cannot be mutated into
    an invalid state after construction.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Dump to JSON-compatible primitives; enums become their values."""
        return self.model_dump(mode="json")

"""Collection validation models — item classification, messages and run results.

A run never raises for invalid data: everything it finds ends up in a
CollectionResult keyed by the original item positions.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

MISSING_NAME_KEY = "Missing name key for entry"
MISSING_FILTER = "Missing filter for entry"

# Sentinel accepted by set_validation_group() to validate every field again
VALIDATE_ALL = "INPUT_FILTER_ALL"


class ItemStatus(str, Enum):
    """How a single collection item was classified."""

    MATCHED = "matched"                    # A validator exists for the discriminator
    MISSING_NAME_KEY = "missing_name_key"  # Item has no discriminator field
    MISSING_FILTER = "missing_filter"      # No validator registered for the discriminator

    @property
    def message(self) -> str:
        if self is ItemStatus.MISSING_NAME_KEY:
            return MISSING_NAME_KEY
        if self is ItemStatus.MISSING_FILTER:
            return MISSING_FILTER
        return ""


class ItemOutcome(BaseModel):
    """Outcome of delegating one item to its validator."""

    key: Any
    discriminator: Any = None
    status: ItemStatus
    valid: bool = True
    values: dict = Field(default_factory=dict)
    raw_values: dict = Field(default_factory=dict)
    valid_input: dict = Field(default_factory=dict)
    invalid_input: dict = Field(default_factory=dict)
    messages: Any = Field(default_factory=dict)


class CollectionResult(BaseModel):
    """Aggregated result of one validation run over a collection."""

    valid: bool = True
    values: dict[Any, Any] = Field(default_factory=dict)
    raw_values: dict[Any, Any] = Field(default_factory=dict)
    valid_inputs: dict[Any, Any] = Field(default_factory=dict)
    invalid_inputs: dict[Any, Any] = Field(default_factory=dict)
    messages: dict[Any, Any] = Field(
        default_factory=dict,
        description="Per-item messages keyed by item position",
    )
    collection_messages: list[dict[str, str]] = Field(
        default_factory=list,
        description="Whole-collection failures (required but empty)",
    )

    def record(self, outcome: ItemOutcome) -> None:
        """Merge a matched item's outcome into the aggregated mappings."""
        if outcome.valid:
            self.valid_inputs[outcome.key] = outcome.valid_input
        else:
            self.valid = False
            self.messages[outcome.key] = outcome.messages
            self.invalid_inputs[outcome.key] = outcome.invalid_input

        self.values[outcome.key] = outcome.values
        self.raw_values[outcome.key] = outcome.raw_values

    @property
    def summary(self) -> dict[str, int]:
        return {
            "values": len(self.values),
            "invalid": len(self.invalid_inputs),
            "messages": len(self.messages),
            "collection_messages": len(self.collection_messages),
        }

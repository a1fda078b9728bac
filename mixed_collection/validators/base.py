"""Item validator capability — the contract every per-item validator implements.

The collection validator treats item validators as black boxes: it feeds one
item in with set_data(), asks is_valid(), then reads the results back.
Conformance is checked once, when the validator is registered.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional


class ItemValidator(ABC):
    """Abstract base for validators of a single collection item.

    Contract:
        - set_data() replaces any previous item, results are for the last item only
        - is_valid() runs validation and may be called repeatedly
        - get_values()/get_raw_values() are populated for valid and invalid items
        - get_unknown() does not require is_valid() to have run
    """

    def __init__(self):
        self.validation_group: Optional[list[str]] = None

    @abstractmethod
    def set_data(self, data: Mapping[str, Any]) -> "ItemValidator":
        """Set the raw item to validate."""
        ...

    @abstractmethod
    def is_valid(self) -> bool:
        """Validate the current item."""
        ...

    @abstractmethod
    def get_valid_input(self) -> dict[str, Any]:
        """Fields that passed validation in the last run."""
        ...

    @abstractmethod
    def get_invalid_input(self) -> dict[str, Any]:
        """Fields that failed validation in the last run, with their raw values."""
        ...

    @abstractmethod
    def get_values(self) -> dict[str, Any]:
        """Sanitized values of the last run."""
        ...

    @abstractmethod
    def get_raw_values(self) -> dict[str, Any]:
        """Raw values of the current item, as given."""
        ...

    @abstractmethod
    def get_messages(self) -> dict[str, Any]:
        """Validation messages of the last run keyed by field name."""
        ...

    @abstractmethod
    def get_unknown(self) -> dict[str, Any]:
        """Fields present in the item that this validator does not know about."""
        ...

    def set_validation_group(self, group: Optional[Iterable[str]]) -> "ItemValidator":
        """Restrict validation to a subset of fields. None validates everything."""
        if isinstance(group, str):
            group = [group]
        self.validation_group = list(group) if group is not None else None
        return self

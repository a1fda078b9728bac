"""Error taxonomy for configuration errors.

These exceptions are raised at call time when the validator cannot even
attempt a validation run (bad registration, bad collection shape, no data).
Validation failures are never raised; they are reported through the
collection result.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Error codes for configuration errors."""

    INVALID_VALIDATOR_TYPE = "INVALID_VALIDATOR_TYPE"
    INVALID_VALIDATOR_CONFIG = "INVALID_VALIDATOR_CONFIG"
    INVALID_KEY_TYPE = "INVALID_KEY_TYPE"
    INVALID_COLLECTION_TYPE = "INVALID_COLLECTION_TYPE"
    INVALID_ITEM_TYPE = "INVALID_ITEM_TYPE"
    NO_DATA_PRESENT = "NO_DATA_PRESENT"


class CollectionValidatorError(Exception):
    """Base class for all mixed collection configuration errors."""

    code: ErrorCode

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "error": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class InvalidValidatorTypeError(CollectionValidatorError, TypeError):
    """A registered object does not implement the item validator capability."""

    code = ErrorCode.INVALID_VALIDATOR_TYPE


class InvalidValidatorConfigError(CollectionValidatorError, ValueError):
    """A declarative validator config cannot be turned into a validator."""

    code = ErrorCode.INVALID_VALIDATOR_CONFIG


class InvalidKeyTypeError(CollectionValidatorError, TypeError):
    """A bulk registration used a non-string discriminator key."""

    code = ErrorCode.INVALID_KEY_TYPE


class InvalidCollectionTypeError(CollectionValidatorError, TypeError):
    """The supplied collection is not iterable."""

    code = ErrorCode.INVALID_COLLECTION_TYPE


class InvalidItemTypeError(CollectionValidatorError, TypeError):
    """A collection item is not a mapping."""

    code = ErrorCode.INVALID_ITEM_TYPE


class NoDataPresentError(CollectionValidatorError, RuntimeError):
    """An operation needs collection data but none has been set."""

    code = ErrorCode.NO_DATA_PRESENT


def debug_type(value: Any) -> str:
    """Type name used in error messages."""
    if value is None:
        return "None"
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"

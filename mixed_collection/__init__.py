"""Validation of heterogeneous collections whose items name their own type."""

from mixed_collection.errors import (
    CollectionValidatorError,
    ErrorCode,
    InvalidCollectionTypeError,
    InvalidItemTypeError,
    InvalidKeyTypeError,
    InvalidValidatorConfigError,
    InvalidValidatorTypeError,
    NoDataPresentError,
)
from mixed_collection.validators import (
    MISSING_FILTER,
    MISSING_NAME_KEY,
    VALIDATE_ALL,
    CollectionResult,
    ItemValidator,
    MixedCollectionValidator,
    ModelItemValidator,
    RequiredMessage,
    ValidatorFactory,
    ValidatorRegistry,
)

__version__ = "1.0.0"

__all__ = [
    "CollectionValidatorError",
    "ErrorCode",
    "InvalidCollectionTypeError",
    "InvalidItemTypeError",
    "InvalidKeyTypeError",
    "InvalidValidatorConfigError",
    "InvalidValidatorTypeError",
    "NoDataPresentError",
    "MISSING_FILTER",
    "MISSING_NAME_KEY",
    "VALIDATE_ALL",
    "CollectionResult",
    "ItemValidator",
    "MixedCollectionValidator",
    "ModelItemValidator",
    "RequiredMessage",
    "ValidatorFactory",
    "ValidatorRegistry",
]

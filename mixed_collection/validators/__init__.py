"""Mixed collection validators — route each collection item to the validator its type names.

Usage:
    from mixed_collection.validators import MixedCollectionValidator

    collection = MixedCollectionValidator(name_key="type", validators={"text": {...}})
    collection.set_data(items)
    if not collection.validate():
        # collection.get_messages() is keyed by item position
"""

from mixed_collection.validators.base import ItemValidator
from mixed_collection.validators.collection import MixedCollectionValidator
from mixed_collection.validators.factory import ValidatorFactory, validator_factory
from mixed_collection.validators.messages import RequiredMessage, Translator
from mixed_collection.validators.model_validator import MODEL_ERROR_KEY, ModelItemValidator
from mixed_collection.validators.models import (
    MISSING_FILTER,
    MISSING_NAME_KEY,
    VALIDATE_ALL,
    CollectionResult,
    ItemOutcome,
    ItemStatus,
)
from mixed_collection.validators.registry import ValidatorRegistry

__all__ = [
    "ItemValidator",
    "MixedCollectionValidator",
    "ValidatorFactory",
    "validator_factory",
    "RequiredMessage",
    "Translator",
    "ModelItemValidator",
    "MODEL_ERROR_KEY",
    "MISSING_FILTER",
    "MISSING_NAME_KEY",
    "VALIDATE_ALL",
    "CollectionResult",
    "ItemOutcome",
    "ItemStatus",
    "ValidatorRegistry",
]

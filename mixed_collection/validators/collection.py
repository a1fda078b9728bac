"""Mixed collection validator — validates collections whose items pick their own validator.

Each item carries a discriminator field (the "name key"). The validator reads
it, looks up the matching item validator in the registry, delegates, and
aggregates the per-item outcomes keyed by the item's original position.

Usage:
    collection = MixedCollectionValidator(name_key="type")
    collection.set_validators({"text": text_validator, "image": image_validator})
    collection.set_data(payload["blocks"])
    if not collection.validate():
        errors = collection.get_messages()
"""

import time
from typing import Any, Iterable, Mapping, Optional

import structlog

from mixed_collection.config import get_settings
from mixed_collection.errors import (
    InvalidCollectionTypeError,
    InvalidItemTypeError,
    NoDataPresentError,
    debug_type,
)
from mixed_collection.validators.base import ItemValidator
from mixed_collection.validators.factory import ValidatorFactory
from mixed_collection.validators.messages import RequiredMessage
from mixed_collection.validators.models import (
    VALIDATE_ALL,
    CollectionResult,
    ItemOutcome,
    ItemStatus,
)
from mixed_collection.validators.registry import ValidatorRegistry, ValidatorSpec

logger = structlog.get_logger()


class MixedCollectionValidator:
    """Validates a collection of mapping items, routing each item by its discriminator.

    Policy:
        - name_key_missing_invalid: items without the name key fail the run
        - filter_missing_invalid: items whose name has no validator fail the run
        - is_required: an empty collection fails the run with a required message
        - count: expected number of items, 0 means "whatever was given"

    Items skipped under a permissive policy contribute nothing to the result.
    """

    def __init__(
        self,
        name_key: Optional[str] = None,
        validators: Optional[Mapping[str, ValidatorSpec]] = None,
        *,
        name_key_missing_invalid: Optional[bool] = None,
        filter_missing_invalid: Optional[bool] = None,
        is_required: Optional[bool] = None,
        count: int = 0,
        registry: Optional[ValidatorRegistry] = None,
        factory: Optional[ValidatorFactory] = None,
        required_message: Optional[RequiredMessage] = None,
    ):
        settings = get_settings()

        self.name_key = name_key if name_key is not None else settings.DEFAULT_NAME_KEY
        self.name_key_missing_invalid = (
            name_key_missing_invalid
            if name_key_missing_invalid is not None
            else settings.NAME_KEY_MISSING_INVALID
        )
        self.filter_missing_invalid = (
            filter_missing_invalid
            if filter_missing_invalid is not None
            else settings.FILTER_MISSING_INVALID
        )
        self.is_required = is_required if is_required is not None else settings.IS_REQUIRED
        self.count = count
        if registry is None:
            factory = factory or ValidatorFactory(default_ignored_fields=(self.name_key,))
            registry = ValidatorRegistry(factory)
        self.registry = registry
        self.required_message = required_message or RequiredMessage()

        self._data: Optional[dict[Any, Mapping]] = None
        self._validation_group: Optional[Mapping[Any, Any]] = None
        self._grouped_validators: list[ItemValidator] = []
        self._result = CollectionResult()

        if validators:
            self.registry.register_all(validators)

    # ── Configuration ──

    @property
    def count(self) -> int:
        """Expected number of items; the stored collection's size when unset."""
        if self._count == 0:
            return len(self._data or {})
        return self._count

    @count.setter
    def count(self, value: int) -> None:
        self._count = max(int(value), 0)

    def set_validator(self, name: str, validator: ValidatorSpec) -> "MixedCollectionValidator":
        """Set the validator used for items whose name key equals name."""
        self.registry.register(name, validator)
        return self

    def set_validators(self, validators: Mapping[str, ValidatorSpec]) -> "MixedCollectionValidator":
        """Set validators for several item types at once."""
        self.registry.register_all(validators)
        return self

    def get_validator(self, name: str) -> Optional[ItemValidator]:
        return self.registry.lookup(name)

    def get_validators(self) -> dict[str, ItemValidator]:
        return self.registry.as_dict()

    def set_validation_group(self, group: Any) -> "MixedCollectionValidator":
        """Restrict item validation to per-item field subsets.

        Args:
            group: Mapping of item key -> field subset, or VALIDATE_ALL to reset
        """
        if group == VALIDATE_ALL or group is None:
            self._validation_group = None
            for validator in self._grouped_validators:
                validator.set_validation_group(None)
            self._grouped_validators = []
        else:
            self._validation_group = group
        return self

    def get_validation_group(self) -> Optional[Mapping[Any, Any]]:
        return self._validation_group

    # ── Input ──

    def set_data(self, data: Iterable[Mapping[str, Any]]) -> "MixedCollectionValidator":
        """Accept a collection for validation.

        The whole collection is checked before anything is stored, so a
        rejected call leaves the previously stored collection in place.

        Raises:
            InvalidCollectionTypeError: If data is not an iterable collection
            InvalidItemTypeError: If any item is not a mapping
        """
        self._data = self._accept(data)
        return self

    def get_data(self) -> dict[Any, Mapping]:
        return dict(self._data or {})

    def _accept(self, data: Any) -> dict[Any, Mapping]:
        if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
            logger.warning("collection_data_rejected", reason="not_iterable", type=debug_type(data))
            raise InvalidCollectionTypeError(
                "Expected an iterable collection; invalid collection of type "
                f"{debug_type(data)} provided",
                details={"type": debug_type(data)},
            )

        items = list(data.items()) if isinstance(data, Mapping) else list(enumerate(data))

        for key, item in items:
            if not isinstance(item, Mapping):
                logger.warning(
                    "collection_data_rejected",
                    reason="invalid_item",
                    key=key,
                    type=debug_type(item),
                )
                raise InvalidItemTypeError(
                    "Expected each item in a collection to be a mapping; invalid item "
                    f"of type {debug_type(item)} detected at key {key!r}",
                    details={"key": key, "type": debug_type(item)},
                )

        return dict(items)

    # ── Validation ──

    def _expected_count(self, data: Mapping) -> int:
        return self._count if self._count else len(data)

    def _classify(self, item: Mapping) -> tuple[ItemStatus, Optional[ItemValidator], Any]:
        """Resolve an item's discriminator to its validator."""
        name = item.get(self.name_key)
        if name is None:
            return ItemStatus.MISSING_NAME_KEY, None, None

        validator = self.registry.lookup(name)
        if validator is None:
            return ItemStatus.MISSING_FILTER, None, name

        return ItemStatus.MATCHED, validator, name

    def _skip_is_invalid(self, status: ItemStatus) -> bool:
        if status is ItemStatus.MISSING_NAME_KEY:
            return self.name_key_missing_invalid
        return self.filter_missing_invalid

    def _run_item(self, key: Any, item: Mapping, validator: ItemValidator, name: Any) -> ItemOutcome:
        validator.set_data(item)

        if self._validation_group is not None:
            validator.set_validation_group(self._validation_group[key])
            if not any(v is validator for v in self._grouped_validators):
                self._grouped_validators.append(validator)

        if validator.is_valid():
            outcome = ItemOutcome(
                key=key,
                discriminator=name,
                status=ItemStatus.MATCHED,
                valid=True,
                valid_input=validator.get_valid_input(),
                values=validator.get_values(),
                raw_values=validator.get_raw_values(),
            )
        else:
            outcome = ItemOutcome(
                key=key,
                discriminator=name,
                status=ItemStatus.MATCHED,
                valid=False,
                messages=validator.get_messages(),
                invalid_input=validator.get_invalid_input(),
                values=validator.get_values(),
                raw_values=validator.get_raw_values(),
            )
        return outcome

    def evaluate(self, data: Optional[Iterable[Mapping[str, Any]]] = None) -> CollectionResult:
        """Validate a collection and return a fresh result.

        Stored aggregation state is not touched, so repeated calls are
        independent of each other.

        Args:
            data: Collection to validate. Defaults to the stored collection

        Returns:
            CollectionResult keyed by original item positions
        """
        start_time = time.perf_counter()
        items = self._accept(data) if data is not None else (self._data or {})
        result = CollectionResult()
        expected = self._expected_count(items)

        if self.is_required and expected < 1:
            result.collection_messages.append(self.required_message.render())
            result.valid = False

        # No message for a short collection
        if len(items) < expected:
            result.valid = False

        if not items:
            logger.info(
                "collection_validated",
                valid=result.valid,
                items=0,
                expected=expected,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            return result

        skipped = 0
        for key, item in items.items():
            status, validator, name = self._classify(item)

            if status is not ItemStatus.MATCHED:
                skipped += 1
                if self._skip_is_invalid(status):
                    result.valid = False
                    result.messages[key] = status.message
                else:
                    logger.debug("collection_item_skipped", key=key, status=status.value, name=name)
                continue

            result.record(self._run_item(key, item, validator, name))

        logger.info(
            "collection_validated",
            valid=result.valid,
            items=len(items),
            expected=expected,
            skipped=skipped,
            summary=result.summary,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

        return result

    def validate(self) -> bool:
        """Validate the stored collection, keeping the result for the accessors."""
        self._result = self.evaluate()
        return self._result.valid

    def is_valid(self) -> bool:
        return self.validate()

    def list_unrecognized(self) -> dict[Any, Any]:
        """Report fields of the stored collection that no validator recognizes.

        Items without a name key or without a matching validator are reported
        with the corresponding marker message. Items with nothing unknown are
        left out.

        Raises:
            NoDataPresentError: If no (or an empty) collection has been set
        """
        if not self._data:
            raise NoDataPresentError("No collection data present")

        unknown_inputs: dict[Any, Any] = {}

        for key, item in self._data.items():
            status, validator, _ = self._classify(item)

            if status is not ItemStatus.MATCHED:
                unknown_inputs[key] = status.message
                continue

            validator.set_data(item)
            unknown = {
                field: value
                for field, value in validator.get_unknown().items()
                if field != self.name_key
            }
            if unknown:
                unknown_inputs[key] = unknown

        return unknown_inputs

    def get_unknown(self) -> dict[Any, Any]:
        return self.list_unrecognized()

    # ── Results ──

    @property
    def result(self) -> CollectionResult:
        """Result of the last validate() call."""
        return self._result

    def get_values(self) -> dict[Any, Any]:
        return self._result.values

    def get_raw_values(self) -> dict[Any, Any]:
        return self._result.raw_values

    def get_messages(self) -> dict[Any, Any]:
        return self._result.messages

    def get_collection_messages(self) -> list[dict[str, str]]:
        return self._result.collection_messages

    def get_valid_input(self) -> dict[Any, Any]:
        return self._result.valid_inputs

    def get_invalid_input(self) -> dict[Any, Any]:
        return self._result.invalid_inputs

    def clear_values(self) -> dict[Any, Any]:
        self._result.values = {}
        return self._result.values

    def clear_raw_values(self) -> dict[Any, Any]:
        self._result.raw_values = {}
        return self._result.raw_values

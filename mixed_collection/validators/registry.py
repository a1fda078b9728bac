"""Validator registry — maps discriminator values to item validators.

Declarative configs are turned into validators through the factory at
registration time, so the registry only ever holds ItemValidator instances.
"""

from typing import Any, Iterable, Iterator, Mapping, Optional, Union

import structlog

from mixed_collection.errors import InvalidKeyTypeError, InvalidValidatorTypeError, debug_type
from mixed_collection.validators.base import ItemValidator
from mixed_collection.validators.factory import ValidatorFactory, validator_factory

logger = structlog.get_logger()

ValidatorSpec = Union[ItemValidator, Mapping[str, Any]]


class ValidatorRegistry:
    """Registry of item validators keyed by discriminator value."""

    def __init__(self, factory: Optional[ValidatorFactory] = None):
        self.factory = factory or validator_factory
        self._validators: dict[str, ItemValidator] = {}

    def _resolve(self, name: str, validator: ValidatorSpec) -> ItemValidator:
        if isinstance(validator, Mapping):
            validator = self.factory.create_from_config(validator)

        if not isinstance(validator, ItemValidator):
            raise InvalidValidatorTypeError(
                f"Validator for '{name}' must be an instance of {ItemValidator.__name__}; "
                f"received {debug_type(validator)}",
                details={"name": name, "received": debug_type(validator)},
            )
        return validator

    def _store(self, name: str, validator: ItemValidator) -> None:
        replaced = name in self._validators
        self._validators[name] = validator
        logger.debug(
            "validator_registered",
            name=name,
            validator=type(validator).__name__,
            replaced=replaced,
        )

    def register(self, name: str, validator: ValidatorSpec) -> ItemValidator:
        """Register the validator used for items whose discriminator equals name.

        Args:
            name: Discriminator value
            validator: ItemValidator instance, or a declarative config for the factory

        Returns:
            The registered validator

        Raises:
            InvalidValidatorTypeError: If the validator does not implement ItemValidator
        """
        validator = self._resolve(name, validator)
        self._store(name, validator)
        return validator

    def register_all(
        self, validators: Union[Mapping[str, ValidatorSpec], Iterable[ValidatorSpec]]
    ) -> None:
        """Register every name -> validator entry of a mapping.

        Non-mapping iterables are keyed by position, which always fails the
        key check. Nothing is registered unless every entry is acceptable.

        Raises:
            InvalidKeyTypeError: If any name is not a string
            InvalidValidatorTypeError: If any validator does not implement ItemValidator
        """
        items = validators.items() if isinstance(validators, Mapping) else enumerate(validators)
        resolved = []
        for name, validator in items:
            if not isinstance(name, str):
                raise InvalidKeyTypeError(
                    f"Validator key must be a string; received {debug_type(name)}",
                    details={"key": repr(name)},
                )
            resolved.append((name, self._resolve(name, validator)))

        for name, validator in resolved:
            self._store(name, validator)

    def lookup(self, name: Any) -> Optional[ItemValidator]:
        """Get the validator for a discriminator value, or None."""
        try:
            return self._validators.get(name)
        except TypeError:
            # Unhashable discriminator values can never match
            return None

    def unregister(self, name: str) -> None:
        """Remove a validator by discriminator value."""
        self._validators.pop(name, None)

    def names(self) -> list[str]:
        return list(self._validators)

    def as_dict(self) -> dict[str, ItemValidator]:
        return dict(self._validators)

    def __contains__(self, name: object) -> bool:
        return self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self._validators)

    def __iter__(self) -> Iterator[str]:
        return iter(self._validators)

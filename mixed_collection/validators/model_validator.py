"""Model item validator — validates one collection item against a pydantic model.

The whole model runs on every item, so field validators, model validators
and model_config rules all apply. When an item fails, the fields that
produced no error are validated again one by one so their sanitized values
stay available next to the messages of the failing fields.
"""

from typing import Any, Iterable, Mapping, Optional

import structlog
from pydantic import AliasChoices, BaseModel, ValidationError
from pydantic.fields import FieldInfo

from mixed_collection.errors import InvalidValidatorConfigError
from mixed_collection.validators.base import ItemValidator

logger = structlog.get_logger()

# Message key for errors raised by model-level validators
MODEL_ERROR_KEY = "__model__"


def _input_names(name: str, info: FieldInfo, by_name: bool) -> list[str]:
    """Keys under which an item may carry a field, in lookup order."""
    names: list[str] = []
    alias = info.validation_alias
    if isinstance(alias, str):
        names.append(alias)
    elif isinstance(alias, AliasChoices):
        names.extend(choice for choice in alias.choices if isinstance(choice, str))
    if info.alias and info.alias not in names:
        names.append(info.alias)
    if by_name or not names:
        names.append(name)
    return names


class ModelItemValidator(ItemValidator):
    """Validates an item against a pydantic model.

    Args:
        model: Pydantic model class describing the item
        ignored_fields: Fields stripped before validation and never reported
            as unknown, typically the collection's discriminator field
    """

    def __init__(self, model: type[BaseModel], ignored_fields: Iterable[str] = ()):
        super().__init__()
        self.model = model
        self.ignored_fields = frozenset(ignored_fields)

        config = model.model_config
        by_name = bool(config.get("populate_by_name") or config.get("validate_by_name"))
        self._inputs = {
            name: _input_names(name, info, by_name)
            for name, info in model.model_fields.items()
        }
        self._field_by_input = {
            key: name for name, keys in self._inputs.items() for key in keys
        }

        self._data: dict[str, Any] = {}
        self._reset()

    def _reset(self) -> None:
        self._values: dict[str, Any] = {}
        self._invalid_input: dict[str, Any] = {}
        self._messages: dict[str, Any] = {}

    @property
    def name(self) -> str:
        return self.model.__name__

    def set_data(self, data: Mapping[str, Any]) -> "ModelItemValidator":
        self._data = dict(data)
        self._reset()
        return self

    def set_validation_group(self, group: Optional[Iterable[str]]) -> "ModelItemValidator":
        if isinstance(group, str):
            group = [group]
        if group is not None:
            group = list(group)
            unknown = [name for name in group if name not in self.model.model_fields]
            if unknown:
                raise InvalidValidatorConfigError(
                    f"Validation group references fields not declared on {self.name}: "
                    f"{', '.join(unknown)}",
                    details={"fields": unknown},
                )
        super().set_validation_group(group)
        return self

    def _active_fields(self) -> list[str]:
        if self.validation_group is None:
            return list(self.model.model_fields)
        return [name for name in self.model.model_fields if name in self.validation_group]

    def _payload(self) -> dict[str, Any]:
        return {k: v for k, v in self._data.items() if k not in self.ignored_fields}

    def _raw(self, name: str) -> Any:
        if name not in self._inputs:
            return self._data.get(name)
        for key in self._inputs[name]:
            if key in self._data:
                return self._data[key]
        return None

    def _is_present(self, name: str) -> bool:
        return any(key in self._data for key in self._inputs[name])

    def _error_field(self, loc: tuple) -> str:
        if not loc:
            return MODEL_ERROR_KEY
        return self._field_by_input.get(loc[0], str(loc[0]))

    def is_valid(self) -> bool:
        self._reset()
        active = self._active_fields()

        try:
            instance = self.model.model_validate(self._payload())
        except ValidationError as e:
            errors = e.errors()
        else:
            dumped = instance.model_dump()
            self._values = {name: dumped[name] for name in active}
            return True

        for err in errors:
            field = self._error_field(err["loc"])
            if self.validation_group is not None and field not in active:
                continue
            self._messages.setdefault(field, {})[err["type"]] = err["msg"]
            if field != MODEL_ERROR_KEY:
                self._invalid_input[field] = self._raw(field)

        passed = [name for name in active if name not in self._messages]
        self._values = self._partial_values(passed)

        return not self._messages

    def _partial_values(self, names: list[str]) -> dict[str, Any]:
        """Validate fields one at a time on an instance holding only defaults."""
        instance = self.model.model_construct()
        validator = self.model.__pydantic_validator__
        succeeded = []

        for name in names:
            if not self._is_present(name):
                if not self.model.model_fields[name].is_required():
                    succeeded.append(name)
                continue
            try:
                validator.validate_assignment(instance, name, self._raw(name))
            except (ValidationError, AttributeError) as e:
                # Model validators may read fields the partial instance lacks
                logger.debug("partial_value_unavailable", model=self.name, field=name, error=str(e))
                continue
            succeeded.append(name)

        if not succeeded:
            return {}
        return instance.model_dump(include=set(succeeded))

    def get_valid_input(self) -> dict[str, Any]:
        return dict(self._values)

    def get_invalid_input(self) -> dict[str, Any]:
        return dict(self._invalid_input)

    def get_values(self) -> dict[str, Any]:
        return dict(self._values)

    def get_raw_values(self) -> dict[str, Any]:
        return {
            name: self._raw(name)
            for name in self.model.model_fields
            if self._is_present(name)
        }

    def get_messages(self) -> dict[str, Any]:
        return dict(self._messages)

    def get_unknown(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in self._data.items()
            if key not in self._field_by_input and key not in self.ignored_fields
        }

    def __repr__(self) -> str:
        return f"ModelItemValidator(model={self.name})"

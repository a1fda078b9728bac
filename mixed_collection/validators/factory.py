"""Validator factory — builds item validators from declarative configuration.

Config format:
    {
        "name": "Article",                  # optional, model name
        "ignore": ["type"],                 # optional, fields never reported as unknown
        "fields": {
            "title": {"type": "str", "required": True, "min_length": 1},
            "views": {"type": "int", "required": False, "default": 0, "ge": 0},
        },
    }

A config may also carry a ready pydantic model under "model" instead of "fields".
"""

from typing import Any, Mapping, Optional

import structlog
from pydantic import BaseModel, Field, PydanticUserError, create_model

from mixed_collection.errors import InvalidValidatorConfigError, debug_type
from mixed_collection.validators.model_validator import ModelItemValidator

logger = structlog.get_logger()

FIELD_TYPES: dict[str, Any] = {
    "str": str,
    "string": str,
    "int": int,
    "integer": int,
    "float": float,
    "number": float,
    "bool": bool,
    "boolean": bool,
    "dict": dict,
    "list": list,
    "any": Any,
}

# Keyword arguments passed straight through to pydantic.Field
FIELD_CONSTRAINTS = {
    "gt", "ge", "lt", "le", "multiple_of",
    "min_length", "max_length", "pattern",
    "description", "title", "examples",
}


class ValidatorFactory:
    """Creates ModelItemValidator instances from declarative configs."""

    def __init__(self, default_ignored_fields: tuple[str, ...] = ()):
        self.default_ignored_fields = default_ignored_fields

    def create_from_config(self, config: Mapping[str, Any]) -> ModelItemValidator:
        """Build an item validator from a declarative config.

        Args:
            config: Mapping with either "fields" or "model", see module docstring

        Returns:
            A ready-to-register ModelItemValidator

        Raises:
            InvalidValidatorConfigError: If the config cannot describe a model
        """
        if not isinstance(config, Mapping):
            raise InvalidValidatorConfigError(
                f"Validator config must be a mapping; received {debug_type(config)}"
            )

        ignored = (*self.default_ignored_fields, *config.get("ignore", ()))

        model = config.get("model")
        if model is not None:
            if not (isinstance(model, type) and issubclass(model, BaseModel)):
                raise InvalidValidatorConfigError(
                    f"'model' must be a pydantic model class; received {debug_type(model)}"
                )
            return ModelItemValidator(model, ignored_fields=ignored)

        fields = config.get("fields")
        if not isinstance(fields, Mapping) or not fields:
            raise InvalidValidatorConfigError(
                "Validator config needs a non-empty 'fields' mapping or a 'model'",
                details={"keys": sorted(str(k) for k in config)},
            )

        model_name = config.get("name", "CollectionItem")
        definitions = {
            field_name: self._field_definition(field_name, spec)
            for field_name, spec in fields.items()
        }

        try:
            model = create_model(model_name, **definitions)
        except (PydanticUserError, TypeError, ValueError) as e:
            raise InvalidValidatorConfigError(
                f"Cannot build model '{model_name}': {e}",
                details={"model": model_name},
            ) from e

        logger.debug("item_validator_created", model=model_name, fields=list(definitions))
        return ModelItemValidator(model, ignored_fields=ignored)

    def _field_definition(self, field_name: str, spec: Optional[Mapping[str, Any]]) -> tuple:
        """Turn one field spec into a (type, FieldInfo) pair for create_model."""
        spec = dict(spec or {})

        type_name = spec.pop("type", "any")
        if isinstance(type_name, str):
            field_type = FIELD_TYPES.get(type_name.lower())
            if field_type is None:
                raise InvalidValidatorConfigError(
                    f"Unknown type '{type_name}' for field '{field_name}'",
                    details={"field": field_name, "allowed": sorted(FIELD_TYPES)},
                )
        else:
            field_type = type_name

        required = spec.pop("required", "default" not in spec)
        default = spec.pop("default", None)
        if not required and default is None:
            field_type = Optional[field_type]

        unsupported = set(spec) - FIELD_CONSTRAINTS
        if unsupported:
            raise InvalidValidatorConfigError(
                f"Unsupported options for field '{field_name}': {', '.join(sorted(unsupported))}",
                details={"field": field_name, "options": sorted(unsupported)},
            )

        if required:
            return field_type, Field(..., **spec)
        return field_type, Field(default=default, **spec)


# Module-level singleton
validator_factory = ValidatorFactory()

"""
Unit tests for ModelItemValidator and ValidatorFactory.
"""

from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mixed_collection.errors import InvalidValidatorConfigError
from mixed_collection.validators import (
    MODEL_ERROR_KEY,
    MixedCollectionValidator,
    ModelItemValidator,
    ValidatorFactory,
)


class Article(BaseModel):
    title: str = Field(min_length=1)
    views: int = Field(default=0, ge=0)
    tags: Optional[list] = None


class Slug(BaseModel):
    slug: str

    @field_validator("slug")
    @classmethod
    def must_be_lowercase(cls, value: str) -> str:
        if value != value.lower():
            raise ValueError("slug must be lowercase")
        return value


class Window(BaseModel):
    start: int
    end: int

    @model_validator(mode="after")
    def check_order(self) -> "Window":
        if self.end < self.start:
            raise ValueError("end before start")
        return self


class Person(BaseModel):
    full_name: str = Field(alias="fullName")
    age: int = Field(default=0, ge=0)


class Contact(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(alias="fullName")


class Point(BaseModel):
    x: int
    y: int


class Marker(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    label: str
    at: Point


class Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")

    n: int


class TestModelItemValidator:
    """Test suite for per-field model validation."""

    @pytest.fixture
    def validator(self):
        return ModelItemValidator(Article, ignored_fields=["type"])

    def test_valid_item(self, validator):
        validator.set_data({"type": "article", "title": "Hello", "views": "12"})

        assert validator.is_valid() is True
        assert validator.get_values() == {"title": "Hello", "views": 12, "tags": None}
        assert validator.get_valid_input() == validator.get_values()
        assert validator.get_messages() == {}
        assert validator.get_invalid_input() == {}

    def test_invalid_field_keeps_other_values(self, validator):
        validator.set_data({"title": "", "views": 3})

        assert validator.is_valid() is False
        assert "string_too_short" in validator.get_messages()["title"]
        assert validator.get_invalid_input() == {"title": ""}
        assert validator.get_values() == {"views": 3, "tags": None}

    def test_missing_required_field(self, validator):
        validator.set_data({"views": 1})

        assert validator.is_valid() is False
        assert validator.get_messages() == {"title": {"missing": "Field required"}}
        assert validator.get_invalid_input() == {"title": None}

    def test_raw_values_only_cover_declared_fields(self, validator):
        validator.set_data({"type": "article", "title": "x", "extra": 1})

        assert validator.get_raw_values() == {"title": "x"}

    def test_unknown_excludes_ignored_fields(self, validator):
        validator.set_data({"type": "article", "title": "x", "extra": 1})

        assert validator.get_unknown() == {"extra": 1}

    def test_set_data_resets_previous_results(self, validator):
        validator.set_data({"title": ""})
        validator.is_valid()
        validator.set_data({"title": "ok"})

        assert validator.get_messages() == {}
        assert validator.is_valid() is True

    def test_validation_group(self, validator):
        validator.set_validation_group(["views"])
        validator.set_data({"views": 5})

        assert validator.is_valid() is True
        assert validator.get_values() == {"views": 5}

    def test_validation_group_accepts_single_name(self, validator):
        validator.set_validation_group("views")

        assert validator.validation_group == ["views"]

    def test_validation_group_rejects_unknown_fields(self, validator):
        with pytest.raises(InvalidValidatorConfigError):
            validator.set_validation_group(["views", "nope"])

    def test_validation_group_reset(self, validator):
        validator.set_validation_group(["views"])
        validator.set_validation_group(None)
        validator.set_data({"views": 5})

        assert validator.is_valid() is False


class TestValidatorFactory:
    """Test suite for building validators from declarative configs."""

    @pytest.fixture
    def factory(self):
        return ValidatorFactory()

    def test_fields_config(self, factory):
        validator = factory.create_from_config({
            "name": "Image",
            "ignore": ["type"],
            "fields": {
                "url": {"type": "str", "min_length": 1},
                "width": {"type": "int", "required": False, "default": 100, "ge": 1},
                "caption": {"type": "str", "required": False},
            },
        })

        assert validator.name == "Image"
        validator.set_data({"type": "image", "url": "http://x"})
        assert validator.is_valid() is True
        assert validator.get_values() == {"url": "http://x", "width": 100, "caption": None}

        validator.set_data({"url": "http://x", "width": 0})
        assert validator.is_valid() is False
        assert "greater_than_equal" in validator.get_messages()["width"]

    def test_field_with_default_is_optional(self, factory):
        validator = factory.create_from_config({"fields": {"n": {"type": "int", "default": 3}}})

        validator.set_data({})
        assert validator.is_valid() is True
        assert validator.get_values() == {"n": 3}

    def test_model_config(self, factory):
        validator = factory.create_from_config({"model": Article})

        assert isinstance(validator, ModelItemValidator)
        assert validator.model is Article

    def test_default_ignored_fields(self):
        factory = ValidatorFactory(default_ignored_fields=("kind",))
        validator = factory.create_from_config({"fields": {"n": {"type": "int"}}})

        validator.set_data({"kind": "num", "n": 1, "x": 2})
        assert validator.get_unknown() == {"x": 2}

    def test_explicit_ignore_extends_default_ignored_fields(self):
        factory = ValidatorFactory(default_ignored_fields=("kind",))
        validator = factory.create_from_config({"ignore": ["source"], "fields": {"n": {"type": "int"}}})

        validator.set_data({"kind": "num", "source": "api", "n": 1})
        assert validator.ignored_fields == {"kind", "source"}
        assert validator.get_unknown() == {}

    @pytest.mark.parametrize("config", [
        "not a mapping",
        {},
        {"fields": {}},
        {"model": dict},
        {"fields": {"n": {"type": "decimal128"}}},
        {"fields": {"n": {"type": "int", "bogus": True}}},
    ])
    def test_invalid_configs(self, factory, config):
        with pytest.raises(InvalidValidatorConfigError):
            factory.create_from_config(config)


class TestModelRules:
    """Field validators, model validators and model_config apply to every item."""

    def test_field_validator_rejects_item(self):
        validator = ModelItemValidator(Slug)
        validator.set_data({"slug": "NOT-Lower"})

        assert validator.is_valid() is False
        assert validator.get_messages() == {
            "slug": {"value_error": "Value error, slug must be lowercase"}
        }
        assert validator.get_invalid_input() == {"slug": "NOT-Lower"}
        assert validator.get_values() == {}

    def test_model_validator_errors_use_model_key(self):
        validator = ModelItemValidator(Window)
        validator.set_data({"start": 5, "end": 1})

        assert validator.is_valid() is False
        assert list(validator.get_messages()) == [MODEL_ERROR_KEY]
        assert "value_error" in validator.get_messages()[MODEL_ERROR_KEY]
        assert validator.get_invalid_input() == {}

        validator.set_data({"start": 1, "end": 5})
        assert validator.is_valid() is True
        assert validator.get_values() == {"start": 1, "end": 5}

    def test_model_config_is_applied(self):
        validator = ModelItemValidator(Marker)
        validator.set_data({"label": "  pin  ", "at": {"x": "1", "y": 2}})

        assert validator.is_valid() is True
        assert validator.get_values() == {"label": "pin", "at": {"x": 1, "y": 2}}

    def test_nested_model_values_are_dumped(self):
        validator = ModelItemValidator(Marker)
        validator.set_data({"label": 5, "at": {"x": 1, "y": 2}})

        assert validator.is_valid() is False
        assert "string_type" in validator.get_messages()["label"]
        assert validator.get_values() == {"at": {"x": 1, "y": 2}}

    def test_nested_errors_are_grouped_under_top_level_field(self):
        validator = ModelItemValidator(Marker)
        validator.set_data({"label": "pin", "at": {"x": "no"}})

        assert validator.is_valid() is False
        assert set(validator.get_messages()["at"]) == {"int_parsing", "missing"}
        assert validator.get_invalid_input() == {"at": {"x": "no"}}
        assert validator.get_values() == {"label": "pin"}

    def test_extra_forbid_reports_unexpected_field(self):
        validator = ModelItemValidator(Strict, ignored_fields=["type"])
        validator.set_data({"type": "strict", "n": 1, "x": 3})

        assert validator.is_valid() is False
        assert validator.get_messages() == {
            "x": {"extra_forbidden": "Extra inputs are not permitted"}
        }
        assert validator.get_invalid_input() == {"x": 3}
        assert validator.get_values() == {"n": 1}


class TestAliases:
    """Fields declared with an alias are read, reported and recognized by that alias."""

    def test_item_uses_alias(self):
        validator = ModelItemValidator(Person, ignored_fields=["type"])
        validator.set_data({"type": "person", "fullName": "Ann"})

        assert validator.is_valid() is True
        assert validator.get_values() == {"full_name": "Ann", "age": 0}
        assert validator.get_raw_values() == {"full_name": "Ann"}
        assert validator.get_unknown() == {}

    def test_failing_item_keeps_aliased_value(self):
        validator = ModelItemValidator(Person)
        validator.set_data({"fullName": "Ann", "age": -1})

        assert validator.is_valid() is False
        assert "greater_than_equal" in validator.get_messages()["age"]
        assert validator.get_values() == {"full_name": "Ann"}

    def test_field_name_is_unknown_without_populate_by_name(self):
        validator = ModelItemValidator(Person)
        validator.set_data({"full_name": "Ann"})

        assert validator.is_valid() is False
        assert validator.get_messages() == {"full_name": {"missing": "Field required"}}
        assert validator.get_invalid_input() == {"full_name": None}
        assert validator.get_unknown() == {"full_name": "Ann"}

    def test_populate_by_name_accepts_both_keys(self):
        validator = ModelItemValidator(Contact)

        for item in ({"fullName": "Ann"}, {"full_name": "Ann"}):
            validator.set_data(item)
            assert validator.is_valid() is True
            assert validator.get_values() == {"full_name": "Ann"}
            assert validator.get_unknown() == {}


class TestModelConfigInCollection:
    """Ready models registered through {"model": ...} configs."""

    def test_field_validator_runs_for_collection_items(self):
        collection = MixedCollectionValidator(name_key="type", validators={"s": {"model": Slug}})
        collection.set_data([{"type": "s", "slug": "ok"}, {"type": "s", "slug": "NOT-Lower"}])

        assert collection.validate() is False
        assert collection.get_messages() == {
            1: {"slug": {"value_error": "Value error, slug must be lowercase"}}
        }
        assert collection.get_values()[0] == {"slug": "ok"}

    def test_aliased_model_in_collection(self):
        collection = MixedCollectionValidator(name_key="type", validators={"p": {"model": Person}})
        collection.set_data([{"type": "p", "fullName": "Ann"}])

        assert collection.validate() is True
        assert collection.get_values() == {0: {"full_name": "Ann", "age": 0}}
        assert collection.list_unrecognized() == {}

    def test_name_key_passes_extra_forbid_models(self):
        collection = MixedCollectionValidator(name_key="kind", validators={"s": {"model": Strict}})
        collection.set_data([{"kind": "s", "n": 1}, {"kind": "s", "n": 2, "x": 3}])

        assert collection.validate() is False
        assert 0 not in collection.get_messages()
        assert collection.get_messages()[1] == {
            "x": {"extra_forbidden": "Extra inputs are not permitted"}
        }
        assert collection.get_invalid_input() == {1: {"x": 3}}

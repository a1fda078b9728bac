"""
Shared pytest configuration and fixtures for the mixed collection tests.

Provides item validators for two simple item types ("a" and "b", both
accepting v >= 0) and a recording validator that captures what the
collection validator feeds into it.
"""

from typing import Any, Mapping, Optional

import pytest
import structlog
from pydantic import BaseModel, Field

from mixed_collection.config import get_settings
from mixed_collection.validators import ItemValidator, MixedCollectionValidator, ModelItemValidator


class ItemA(BaseModel):
    v: int = Field(ge=0)


class ItemB(BaseModel):
    v: int = Field(ge=0)
    label: str = "untitled"


class RecordingValidator(ItemValidator):
    """Item validator stub that records calls and returns canned results."""

    def __init__(self, valid: bool = True, unknown: Optional[dict] = None):
        super().__init__()
        self.valid = valid
        self.unknown = unknown or {}
        self.seen: list[dict] = []
        self.groups: list[Any] = []

    def set_data(self, data: Mapping[str, Any]) -> "RecordingValidator":
        self.data = dict(data)
        self.seen.append(self.data)
        return self

    def set_validation_group(self, group):
        self.groups.append(group)
        return super().set_validation_group(group)

    def is_valid(self) -> bool:
        return self.valid

    def get_valid_input(self) -> dict:
        return dict(self.data) if self.valid else {}

    def get_invalid_input(self) -> dict:
        return {} if self.valid else dict(self.data)

    def get_values(self) -> dict:
        return {"seen": len(self.seen)}

    def get_raw_values(self) -> dict:
        return dict(self.data)

    def get_messages(self) -> dict:
        return {} if self.valid else {"stub": {"invalid": "Stub rejected the item"}}

    def get_unknown(self) -> dict:
        return dict(self.unknown)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; each test starts from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def validator_a() -> ModelItemValidator:
    return ModelItemValidator(ItemA, ignored_fields=["type"])


@pytest.fixture
def validator_b() -> ModelItemValidator:
    return ModelItemValidator(ItemB, ignored_fields=["type"])


@pytest.fixture
def collection(validator_a, validator_b) -> MixedCollectionValidator:
    """Collection validator routing on "type" with permissive defaults."""
    return MixedCollectionValidator(
        name_key="type",
        validators={"a": validator_a, "b": validator_b},
        name_key_missing_invalid=False,
        filter_missing_invalid=False,
        is_required=False,
    )


@pytest.fixture
def recording_validator() -> RecordingValidator:
    return RecordingValidator()

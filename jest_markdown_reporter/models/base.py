"""Base model configuration for all data structures."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_snake


class Model(BaseModel):
    """Base model with standard configuration.

    Host payloads use camelCase keys; they are normalized to the snake_case
    field names before validation so both spellings are accepted.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized = {
            to_snake(key) if isinstance(key, str) else key: value
            for key, value in data.items()
        }
        return cls._adapt_payload(normalized)

    @classmethod
    def _adapt_payload(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Hook for models that accept more than one payload shape."""
        return data

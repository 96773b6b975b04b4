"""Base Pydantic models for catalog entries, records, and payloads.

This module defines the foundational model classes used by every
structure the core produces or consumes. It enforces immutability and
strict schema validation so that validated steps and stored records can
be passed between components without defensive copying.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all core structures.

    Design principles enforced by this model:
        - Immutability: records cannot be modified after creation.
          Updates produce new records read back from the store.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in client payloads.
        - camelCase wire names: fields are declared in snake_case and
          exposed to callers under camelCase aliases. Both spellings are
          accepted on input.

    All models must inherit from this class.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra='forbid',
    )

    def dump(self, **kwargs: Any) -> dict[str, Any]:  # noqa: ANN401
        """Serialize the model with wire (camelCase) names.

        Args:
            **kwargs: Extra options for `model_dump`.

        Returns:
            A JSON-compatible dictionary.
        """
        return self.model_dump(mode='json', by_alias=True, **kwargs)


class DescribedMixin(SchemaModel):
    """Mixin providing an optional human-readable description.

    The field does not affect validation or ordering semantics and is
    used purely for presentation.
    """

    description: str | None = Field(
        default=None,
        title='Description',
        description='Detailed human-readable description of the element.',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.

    All settings models must inherit from this class.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )

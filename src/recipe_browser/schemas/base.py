"""Base schema configuration for all Pydantic models.

The recipe API speaks camelCase JSON; models use snake_case attributes
and accept either spelling on input.

Usage:
    - ApiRequest: bodies sent to the recipe API
    - ApiResponse: records and envelopes received from the recipe API
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        validate_assignment=True,
        serialize_by_alias=True,
    )


class ApiRequest(_BaseSchema):
    """Base class for request bodies sent to the recipe API.

    Extra fields are forbidden - we only send what we declare.
    """

    model_config = ConfigDict(
        extra="forbid",
    )


class ApiResponse(_BaseSchema):
    """Base class for payloads received from the recipe API.

    Extra fields are ignored - the backend may add columns at any time.
    """

    model_config = ConfigDict(
        extra="ignore",
    )

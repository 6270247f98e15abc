"""Base Pydantic model configuration for TEOS models.

All TEOS models inherit from TEOSBaseModel to ensure consistent behavior:
- Immutability (frozen=True) so an envelope is never mutated after creation
- Strict validation (extra="forbid") to catch typos and injected fields
- camelCase aliases for the wire and canonical encodings, while Python code
  uses snake_case attribute names (populate_by_name=True)
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TEOSBaseModel(BaseModel):
    """Base model for all TEOS entities.

    Example:
        >>> class Sample(TEOSBaseModel):
        ...     context_id: str
        >>> Sample(contextId="ctx").model_dump(by_alias=True)
        {'contextId': 'ctx'}
        >>> Sample(context_id="ctx").context_id
        'ctx'
    """

    model_config = ConfigDict(
        # Immutability: envelopes are consumed, never edited in place
        frozen=True,

        # Strict validation: reject unknown fields
        extra="forbid",

        # Wire names are camelCase; Python names stay snake_case
        alias_generator=to_camel,
        populate_by_name=True,

        # Validate default values
        validate_default=True,

        json_schema_extra={
            "additionalProperties": False,
        },
    )

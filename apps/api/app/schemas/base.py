"""Shared schema base for camelCase wire models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Wire models for the camelCase tables (Project, Offer, Financial, ...).

    Accepts either snake_case or camelCase on input, emits camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

"""
5dpapa Backend - Schema Base
=============================
Request/response models speak camelCase on the wire (fullName, productId,
totalAmount...) and snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def not_blank(value):
    """Shared field-validator body: reject strings that are empty after strip."""
    if isinstance(value, str) and not value.strip():
        raise ValueError("must not be blank")
    return value

"""
Utility functions for schema validation.
"""
from typing import Optional, Type, TypeVar, Union
from pydantic import BaseModel, ValidationError

from flashdeck.core.exceptions import InvalidInputError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def strip_required(v: str, field_name: str) -> str:
    """
    Strip surrounding whitespace and reject blank values.

    Args:
        v: Raw string value
        field_name: Field name used in the error message

    Returns:
        The stripped value

    Raises:
        ValueError: If nothing remains after stripping
    """
    if v is None or not v.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return v.strip()


def strip_optional(v: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace, mapping blank values to None."""
    if v is None:
        return None
    v = v.strip()
    return v or None


def parse_input(schema: Type[SchemaT], data: Union[SchemaT, dict]) -> SchemaT:
    """
    Validate raw input against a request schema.

    Already-validated schema instances pass through unchanged. Validation
    failures become InvalidInputError tagged with the first offending field.
    """
    if isinstance(data, schema):
        return data
    try:
        if isinstance(data, BaseModel):
            data = data.model_dump()
        return schema.model_validate(data)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(part) for part in first_error.get("loc", ())) or None
        message = first_error.get("msg", "Invalid input")
        raise InvalidInputError(f"{field}: {message}" if field else message, field=field) from e

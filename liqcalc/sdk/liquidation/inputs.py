"""Boundary validation for liquidation inputs.

Callers may pass model instances or plain mappings (e.g., parsed JSON).
Either way the value is validated here, before anything is computed, and
pydantic errors are re-raised as InvalidInputError.
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import InvalidInputError

M = TypeVar("M", bound=BaseModel)


def format_validation_errors(e: ValidationError) -> str:
    """Flatten pydantic errors into 'loc: msg; loc: msg'."""
    errors = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err["loc"])
        msg = err["msg"]
        errors.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(errors)


def coerce_model(model: Type[M], value: Any, label: str) -> M:
    """Validate a model instance or mapping into a fresh `model` instance.

    Instances are re-validated too, so a value built with model_construct()
    (which skips validation) cannot smuggle negative amounts in.

    Raises:
        InvalidInputError: If value is None or fails validation
    """
    if value is None:
        raise InvalidInputError(f"Missing required input: {label}")

    if isinstance(value, BaseModel):
        if not isinstance(value, model):
            raise InvalidInputError(
                f"Invalid {label}: expected {model.__name__}, got {type(value).__name__}"
            )
        value = value.model_dump()

    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid {label}: {format_validation_errors(e)}") from e

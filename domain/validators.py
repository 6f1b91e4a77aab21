"""
Validation helpers for rows written through the portal forms.
"""
import re
from typing import Any, Dict, Iterable, Type, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_row(model: Type[T], data: dict) -> T:
    """Validate dict against a row model; raises helpful error if invalid."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        # Re-raise with a cleaner message for UI consumption
        raise ValueError(f"{model.__name__} validation failed: {e}")


def require_fields(data: Dict[str, Any], names: Iterable[str]) -> None:
    """Ad hoc required-field check done before submitting a form."""
    missing = [n for n in names if data.get(n) is None or (isinstance(data.get(n), str) and not data[n].strip())]
    if missing:
        raise ValueError(f"Please fill in all required fields: {', '.join(missing)}")


def is_valid_email(value: str) -> bool:
    return bool(value and _EMAIL_RE.match(value.strip()))

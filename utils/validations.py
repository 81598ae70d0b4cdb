"""
Form input validation utilities
"""
from typing import Dict, Optional, Tuple, Type, TypeVar
import re

from pydantic import BaseModel, ValidationError

FormModel = TypeVar("FormModel", bound=BaseModel)

PERIOD_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def validate_form(
    schema: Type[FormModel],
    data: dict,
) -> Tuple[Optional[FormModel], Dict[str, str]]:
    """
    Bind raw widget values to a form schema.
    Returns (model, {}) on success or (None, {field: message}) on failure.
    Fields listed in the schema's error_messages report that message.
    """
    try:
        return schema.model_validate(data), {}
    except ValidationError as e:
        messages = getattr(schema, "error_messages", {})
        errors: Dict[str, str] = {}
        for err in e.errors():
            field = ".".join(str(part) for part in err.get("loc", ())) or "form"
            message = messages.get(field) or _clean_message(err.get("msg", "Invalid value"))
            # Keep the first message per field
            errors.setdefault(field, message)
        return None, errors


def _clean_message(message: str) -> str:
    # pydantic prefixes custom validator messages
    return message.replace("Value error, ", "")


def validate_period(period: str) -> bool:
    """Validate a YYYY-MM billing period"""
    if not period:
        return False
    return bool(PERIOD_PATTERN.match(period.strip()))


def validate_year(year: str) -> bool:
    """Validate a four digit filter year"""
    return bool(re.match(r"^\d{4}$", str(year or "")))

"""
Request body validation for property create/update
"""

import math

from .constants import MAX_DB_INTEGER, RATING_MIN, RATING_MAX
from .exceptions import ValidationException
from .utils import parse_date, split_list_param

# JSON field -> (model attribute, kind, required on create)
PROPERTY_FIELDS = {
    "title": ("title", "string", True),
    "type": ("type", "string", True),
    "price": ("price", "number", True),
    "state": ("state", "string", True),
    "city": ("city", "string", True),
    "areaSqFt": ("area_sq_ft", "number", True),
    "bedrooms": ("bedrooms", "integer", True),
    "bathrooms": ("bathrooms", "integer", True),
    "amenities": ("amenities", "list", False),
    "furnished": ("furnished", "string", True),
    "availableFrom": ("available_from", "date", True),
    "listedBy": ("listed_by", "string", True),
    "tags": ("tags", "list", False),
    "colorTheme": ("color_theme", "string", True),
    "rating": ("rating", "number", False),
    "isVerified": ("is_verified", "boolean", False),
    "listingType": ("listing_type", "string", True),
}


def _coerce(name, kind, value):
    if kind == "string":
        if not isinstance(value, str) or not value.strip():
            raise ValidationException(f"'{name}' must be a non-empty string")
        return value.strip()

    if kind in ("number", "integer"):
        if isinstance(value, bool):
            raise ValidationException(f"'{name}' must be a number")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationException(f"'{name}' must be a number")
        if math.isnan(number) or math.isinf(number):
            raise ValidationException(f"'{name}' must be a finite number")
        if kind == "integer":
            if not number.is_integer():
                raise ValidationException(f"'{name}' must be an integer")
            if abs(number) > MAX_DB_INTEGER:
                raise ValidationException(f"'{name}' is out of range")
            return int(number)
        return number

    if kind == "boolean":
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise ValidationException(f"'{name}' must be a boolean")

    if kind == "date":
        try:
            return parse_date(value)
        except (TypeError, ValueError):
            raise ValidationException(f"'{name}' must be an ISO date")

    if kind == "list":
        if value is None:
            return []
        if isinstance(value, str) or (isinstance(value, list) and all(isinstance(v, str) for v in value)):
            return split_list_param(value)
        raise ValidationException(f"'{name}' must be a list of strings")

    raise ValueError(f"Unknown field kind {kind}")


def validate_property_payload(data, partial=False):
    """
    Validate a property body and map it to model attributes.

    With `partial` only the supplied fields are checked (updates);
    otherwise every required field must be present (create).
    Unknown fields are ignored.
    """
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")

    values = {}
    missing = []
    for name, (attr, kind, required) in PROPERTY_FIELDS.items():
        if name not in data or data[name] is None:
            if required and not partial:
                missing.append(name)
            continue
        values[attr] = _coerce(name, kind, data[name])

    if missing:
        raise ValidationException(f"Missing required fields: {', '.join(missing)}")

    if "price" in values and values["price"] < 0:
        raise ValidationException("'price' must be greater than or equal to 0")
    if "area_sq_ft" in values and values["area_sq_ft"] < 0:
        raise ValidationException("'areaSqFt' must be greater than or equal to 0")
    if "rating" in values and not RATING_MIN <= values["rating"] <= RATING_MAX:
        raise ValidationException(f"'rating' must be between {RATING_MIN} and {RATING_MAX}")

    return values


def validate_external_id(value):
    if not isinstance(value, str) or not value.strip():
        raise ValidationException("'id' must be a non-empty string")
    value = value.strip()
    if len(value) > 64:
        raise ValidationException("'id' must be at most 64 characters")
    return value

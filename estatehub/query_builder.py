"""
Search filter builder

Translates the loose, string-valued query parameters of
GET /api/properties/search into SQLAlchemy criteria over Property and a
canonical cache key. Building the criteria never touches the database.

| param                         | criterion                                 |
|-------------------------------|-------------------------------------------|
| type, state, city, furnished, | equality                                  |
| listedBy, colorTheme,         |                                           |
| listingType                   |                                           |
| isVerified                    | "true" -> True, any other value -> False  |
| bedrooms, bathrooms           | numeric equality                          |
| minPrice / maxPrice           | price >= min, price <= max                |
| minArea / maxArea             | areaSqFt >= min, areaSqFt <= max          |
| minRating                     | rating >= min                             |
| availableFrom                 | availableFrom <= date                     |
| amenities, tags               | listing must contain every given value    |

Unknown parameters are ignored and empty values impose no constraint.
"""

import json
import math
from typing import Any, Dict, List, NamedTuple

from .constants import (
    CACHE_PREFIX_PROPERTY_SEARCH,
    MAX_DB_INTEGER,
    SEARCH_EQUALITY_PARAMS,
    SEARCH_NUMERIC_PARAMS,
    SEARCH_RANGE_PARAMS,
    SEARCH_SET_PARAMS,
)
from .exceptions import ValidationException
from .models.property import Property, PropertyAmenity, PropertyTag
from .utils import parse_date, split_list_param

# Query parameter -> Property column attribute
COLUMN_FOR_PARAM = {
    "type": "type",
    "state": "state",
    "city": "city",
    "furnished": "furnished",
    "listedBy": "listed_by",
    "colorTheme": "color_theme",
    "listingType": "listing_type",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
}

# Range parameter -> (column attribute, operator)
RANGE_FOR_PARAM = {
    "minPrice": ("price", ">="),
    "maxPrice": ("price", "<="),
    "minArea": ("area_sq_ft", ">="),
    "maxArea": ("area_sq_ft", "<="),
    "minRating": ("rating", ">="),
}


class PropertySearch(NamedTuple):
    params: Dict[str, Any]
    filters: List[Any]
    cache_key: str


def _first(args, name):
    value = args.get(name)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _many(args, name):
    if hasattr(args, "getlist"):
        return split_list_param(args.getlist(name))
    return split_list_param(args.get(name))


def to_number(value, name, integer_column=False):
    """
    Coerce a query string value to int or float, rejecting non-numeric input.

    Integral values become int only while they fit a 64-bit integer; larger
    bounds stay float. For `integer_column` params an out-of-range value is
    a validation error since no row can match it.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationException(f"Invalid numeric value for '{name}': {value!r}")
    if math.isnan(number) or math.isinf(number):
        raise ValidationException(f"Invalid numeric value for '{name}': {value!r}")
    if abs(number) > MAX_DB_INTEGER:
        if integer_column:
            raise ValidationException(f"Numeric value for '{name}' is out of range: {value!r}")
        return number
    return int(number) if number.is_integer() else number


def canonicalize_params(args):
    """
    Reduce request parameters to their typed, canonical form.

    Only recognized parameters survive. Set-valued parameters are
    de-duplicated and sorted since containment does not depend on order.
    Raises ValidationException on values that cannot be coerced.
    """
    params = {}

    for name in SEARCH_EQUALITY_PARAMS:
        value = _first(args, name)
        if value is not None:
            params[name] = value

    value = _first(args, "isVerified")
    if value is not None:
        params["isVerified"] = value == "true"

    for name in SEARCH_NUMERIC_PARAMS:
        value = _first(args, name)
        if value is not None:
            params[name] = to_number(value, name, integer_column=True)

    for name in SEARCH_RANGE_PARAMS:
        value = _first(args, name)
        if value is not None:
            params[name] = to_number(value, name)

    value = _first(args, "availableFrom")
    if value is not None:
        try:
            params["availableFrom"] = parse_date(value).isoformat()
        except ValueError:
            raise ValidationException(f"Invalid date for 'availableFrom': {value!r}")

    for name in SEARCH_SET_PARAMS:
        values = _many(args, name)
        if values:
            params[name] = sorted(values)

    return params


def make_search_cache_key(params):
    """Deterministic cache key: identical parameter sets give identical keys regardless of order"""
    return CACHE_PREFIX_PROPERTY_SEARCH + json.dumps(params, sort_keys=True, separators=(",", ":"))


def build_filters(params):
    """Build SQLAlchemy criteria from canonical parameters"""
    filters = []

    for name, attr in COLUMN_FOR_PARAM.items():
        if name in params:
            filters.append(getattr(Property, attr) == params[name])

    if "isVerified" in params:
        filters.append(Property.is_verified == params["isVerified"])

    for name, (attr, op) in RANGE_FOR_PARAM.items():
        if name not in params:
            continue
        column = getattr(Property, attr)
        filters.append(column >= params[name] if op == ">=" else column <= params[name])

    if "availableFrom" in params:
        filters.append(Property.available_from <= parse_date(params["availableFrom"]))

    for amenity in params.get("amenities", []):
        filters.append(Property.amenity_rows.any(PropertyAmenity.name == amenity))

    for tag in params.get("tags", []):
        filters.append(Property.tag_rows.any(PropertyTag.name == tag))

    return filters


def build_property_search(args):
    """Turn raw request args (dict or MultiDict) into criteria plus cache key"""
    params = canonicalize_params(args)
    return PropertySearch(params=params, filters=build_filters(params), cache_key=make_search_cache_key(params))

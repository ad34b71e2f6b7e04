from datetime import datetime, timezone

from flask import request
from werkzeug.routing import IntegerConverter

from outtie.errors import ValidationError

# signed 64-bit, the widest integer the store accepts
MAX_DB_INT = 2**63 - 1


class IdConverter(IntegerConverter):
    """`<id:...>` route segment: a positive integer the store can bind."""

    def __init__(self, url_map):
        super().__init__(url_map, min=1, max=MAX_DB_INT)


def reject_unknown(data: dict, allowed) -> None:
    unknown = sorted(k for k in data if k not in allowed)
    if unknown:
        raise ValidationError(f"Unknown or read-only field(s): {', '.join(unknown)}", fields=unknown)


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def pick(data: dict, name: str, alias: str):
    """Value of `name`, falling back to its camelCase `alias`."""
    return data[name] if name in data else data.get(alias)


def as_int(value, field: str, errors: list, required: bool = True, from_query: bool = False):
    """
    JSON bodies must carry real numbers; query-string values arrive as text
    and are parsed only when `from_query` is set.
    """
    if value is None:
        if required:
            errors.append(field)
        return None
    # bool is an int subclass; "true" is never a valid id or rating
    if isinstance(value, bool) or (isinstance(value, str) and not from_query):
        errors.append(field)
        return None
    if isinstance(value, float) and not value.is_integer():
        errors.append(field)
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        errors.append(field)
        return None
    if not -MAX_DB_INT <= number <= MAX_DB_INT:
        errors.append(field)
        return None
    return number


def as_id(value, field: str, errors: list, required: bool = True):
    number = as_int(value, field, errors, required)
    if number is not None and number < 1:
        errors.append(field)
        return None
    return number


def as_datetime(value, field: str, errors: list):
    if is_blank(value):
        return None
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        errors.append(field)
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

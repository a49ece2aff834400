import math


def to_number(value, default=0.0):
    """Parse a form value as a float, falling back to `default` when blank or invalid."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def clean_str(value):
    return str(value).strip() if value is not None else ''

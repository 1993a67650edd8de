"""
Data utility functions for value conversions and null handling.

Hierarchy payloads come from JSON, so address and name values can be any JSON
type. These helpers turn them into clean strings.
"""

import pandas as pd
from typing import Any, Dict


def safe_string_conversion(value: Any) -> str:
    """
    Safely convert a value to string, handling nulls and cleaning whitespace.

    Args:
        value: Value to convert to string

    Returns:
        Cleaned string value or empty string if null or not a scalar
    """
    if value is None or isinstance(value, (dict, list)):
        return ""

    if pd.isna(value):
        return ""

    return str(value).strip()


def get_nested(mapping: Dict[str, Any], *keys: str) -> Any:
    """
    Walk nested dictionaries, returning None as soon as a level is missing.

    Example:
        get_nested(props, 'locales', 'default', 'name')
    """
    current: Any = mapping
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current

# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Value post-processing

Converts raw decoded tag values into friendlier ones: EXIF date strings
become datetime objects, enumerated codes become their descriptions, and a
few byte-array tags are rendered as text.

Copyright 2025 DNAi inc.
"""

from datetime import datetime
from typing import Any, Optional, Sequence, Union

from tiffmeta.exif_tags import BYTE_VALUE_STRINGS, DATE_TAGS, VALUE_STRINGS


def revive_date(value: Any) -> Optional[datetime]:
    """
    Parse an EXIF date string.

    Supports formats:
    - YYYY:MM:DD
    - YYYY:MM:DD HH:MM:SS (fractional seconds are truncated)

    Args:
        value: Raw tag value

    Returns:
        datetime, or None for non-string or unparseable input
    """
    if not isinstance(value, str):
        return None
    parts = value.strip().split(' ')
    try:
        year, month, day = (int(part) for part in parts[0].split(':'))
        if len(parts) > 1 and parts[1]:
            hours, minutes, seconds = (float(part) for part in parts[1].split(':'))
            return datetime(year, month, day, int(hours), int(minutes), int(seconds))
        return datetime(year, month, day)
    except (ValueError, OverflowError):
        return None


def convert_dms_to_dd(degrees: float, minutes: float, seconds: float, direction: Optional[str]) -> float:
    """
    Convert degrees/minutes/seconds to decimal degrees.

    Southern latitudes and western longitudes are negative.
    """
    dd = degrees + minutes / 60 + seconds / 3600
    if direction in ('S', 'W'):
        dd *= -1
    return dd


def set_value_or_append(new_value: Any, existing_value: Any) -> Any:
    """
    Combine a repeated value with what is already stored under its key.

    The first value is stored as is, the second turns the entry into a
    list, later ones are appended.
    """
    if existing_value is None:
        return new_value
    if isinstance(existing_value, list):
        existing_value.append(new_value)
        return existing_value
    return [existing_value, new_value]


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _join(values: Any, separator: str) -> Any:
    if isinstance(values, (list, tuple, bytes)):
        return separator.join(_format_number(v) for v in values)
    return values


def _byte_descriptions(key: str, value: Any) -> Any:
    table = BYTE_VALUE_STRINGS[key]
    if isinstance(value, int):
        value = [value]
    if not isinstance(value, (bytes, list, tuple)):
        return value
    return ', '.join(table.get(code, str(code)) for code in value)


def _version_string(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode('ascii', errors='replace')
    if isinstance(value, Sequence) and not isinstance(value, str):
        return ''.join(chr(code) for code in value)
    return value


def translate_value(key: Union[str, int], value: Any) -> Any:
    """
    Post-process a decoded tag value.

    Args:
        key: Tag name (or numeric id when the name is unknown)
        value: Raw decoded value

    Returns:
        Translated value; unmapped codes pass through unchanged
    """
    if value is None:
        return None
    if key in DATE_TAGS:
        return revive_date(value)
    if key in BYTE_VALUE_STRINGS:
        return _byte_descriptions(key, value)
    table = VALUE_STRINGS.get(key)
    if table is not None:
        if isinstance(value, (int, str)):
            return table.get(value, value)
        return value
    if key in ('ExifVersion', 'FlashpixVersion', 'InteropVersion'):
        return _version_string(value)
    if key == 'GPSVersionID':
        return _join(value, '.')
    if key == 'GPSTimeStamp':
        return _join(value, ':')
    return value

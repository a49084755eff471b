"""
Submission data copying and date rewriting.

The provider expects day components in its own ``day/month/year`` or
``month/day/year`` layout while clients submit ``year-month-day``. This module
produces an independent deep copy of the submitted data and rewrites day values
on the copy only, leaving the caller's data untouched.
"""

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from ..exceptions import CopyFailure
from ..schemas.form_schemas import FormDataMap

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^[^-]+-[^-]+-[^-]+$")
DATE_SEPARATOR = "-"
OUTPUT_SEPARATOR = "/"
YEAR_INDEX, MONTH_INDEX, DAY_INDEX = 0, 1, 2


def copy_form_data(data: Optional[FormDataMap]) -> Optional[FormDataMap]:
    """
    Deep copy submitted data through a JSON round trip.

    Every nested mapping and list in the result is a fresh object.

    Raises:
        CopyFailure: If the data holds values that cannot be represented as JSON,
            including mapping keys that are not strings
    """
    if data is None:
        return None
    try:
        serialized = json.dumps(data, allow_nan=False)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to copy form data: {e}")
        raise CopyFailure("Error while copying form data") from e
    _ensure_string_keys(data)
    return json.loads(serialized)


def _ensure_string_keys(value: Any) -> None:
    # json.dumps coerces int, float, bool and None keys to strings
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                logger.error(f"Failed to copy form data: non-string key {key!r}")
                raise CopyFailure("Error while copying form data")
            _ensure_string_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _ensure_string_keys(item)


def convert_date(value: str, day_first: bool) -> str:
    """
    Convert a ``year-month-day`` string to the provider's date layout.

    Segments are re-emitted verbatim. Values that are not exactly three
    dash-separated non-empty segments are returned unchanged.

    Args:
        value: Submitted date string
        day_first: ``True`` for ``day/month/year``, ``False`` for ``month/day/year``

    Returns:
        Converted or original string
    """
    if not DATE_PATTERN.match(value):
        return value
    parts = value.split(DATE_SEPARATOR)
    if day_first:
        ordered = (parts[DAY_INDEX], parts[MONTH_INDEX], parts[YEAR_INDEX])
    else:
        ordered = (parts[MONTH_INDEX], parts[DAY_INDEX], parts[YEAR_INDEX])
    return OUTPUT_SEPARATOR.join(ordered)


def change_date_format(data: Optional[Dict[str, Any]], day_components: Mapping[str, bool]) -> None:
    """Rewrite day values of ``data`` in place, recursing into repeating groups."""
    if data is None:
        return
    for key, value in data.items():
        if isinstance(value, str):
            if key in day_components:
                data[key] = convert_date(value, bool(day_components[key]))
        elif isinstance(value, list):
            _change_rows(value, day_components)


def _change_rows(rows: List[Any], day_components: Mapping[str, bool]) -> None:
    for row in rows:
        if isinstance(row, dict):
            change_date_format(row, day_components)


def copy_and_transform(
    data: Optional[FormDataMap],
    day_components: Mapping[str, bool]
) -> Optional[FormDataMap]:
    """
    Copy submitted data and rewrite day values on the copy.

    Args:
        data: Caller-supplied submission data, never modified
        day_components: Day component keys mapped to their ``dayFirst`` flag

    Returns:
        Transformed copy, or ``None`` when ``data`` is ``None``

    Raises:
        CopyFailure: If the data cannot be copied
    """
    data_copy = copy_form_data(data)
    change_date_format(data_copy, day_components)
    return data_copy

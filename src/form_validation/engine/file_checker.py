"""
File completeness checking for submitted form data.

File components carry references to previously uploaded content in the shape
``[{"id": "...", "checksum": "..."}, ...]``. The provider does not reliably
report missing or malformed references, so they are re-derived here from the
original submission and reported as ``ErrorDetail`` records.

Two policies are available:

- ``REQUIRED``: only keys whose component is required are checked. A value that
  is null, an empty list, or anything other than a list of well-formed file
  references is reported.
- ``ANY_INVALID``: required keys are checked as above; additionally any other
  file key carrying a non-null, non-empty value of the wrong shape is reported.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..schemas.form_schemas import ErrorDetail, FormDataMap, stringify_value

logger = logging.getLogger(__name__)

FILE_VALUE_ID = "id"
FILE_VALUE_CHECKSUM = "checksum"


class FileCheckPolicy(str, Enum):
    """Which file keys are checked for completeness."""
    REQUIRED = "required"
    ANY_INVALID = "any_invalid"


def _is_not_blank(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_valid_file_reference(value: Any) -> bool:
    """Check a single ``{"id": str, "checksum": str}`` reference."""
    if not isinstance(value, dict):
        return False
    return _is_not_blank(value.get(FILE_VALUE_ID)) and _is_not_blank(value.get(FILE_VALUE_CHECKSUM))


def is_valid_file_value(value: Any) -> bool:
    """
    Check a complete file value.

    A value is valid when it is a non-empty list whose every element is a
    well-formed file reference.
    """
    if not isinstance(value, list) or not value:
        return False
    return all(is_valid_file_reference(item) for item in value)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, list) and not value:
        return False
    return True


class _FileErrorCollector:
    """Depth-first walker accumulating file errors in encounter order."""

    def __init__(
        self,
        required_file_keys: Mapping[str, Optional[str]],
        file_messages: Mapping[str, Optional[str]],
        policy: FileCheckPolicy
    ):
        self.required_file_keys = required_file_keys
        self.file_messages = file_messages
        self.policy = policy
        self.errors: List[ErrorDetail] = []

    def _checked_keys(self) -> Mapping[str, Optional[str]]:
        if self.policy == FileCheckPolicy.ANY_INVALID:
            return self.file_messages
        return self.required_file_keys

    def walk(self, data: Dict[str, Any]) -> None:
        checked_keys = self._checked_keys()
        for key, value in data.items():
            if key in checked_keys:
                self._check(key, value)
            elif isinstance(value, list):
                for row in value:
                    if isinstance(row, dict):
                        self.walk(row)

    def _check(self, key: str, value: Any) -> None:
        if key in self.required_file_keys:
            if not is_valid_file_value(value):
                self.add_required_error(key, value)
        elif _is_present(value) and not is_valid_file_value(value):
            message = self.file_messages.get(key) or f"{key} has an invalid file value"
            self.errors.append(ErrorDetail(message=message, field=key, value=stringify_value(value)))

    def add_required_error(self, key: str, value: Any) -> None:
        message = self.required_file_keys.get(key) or f"{key} is required"
        self.errors.append(ErrorDetail(message=message, field=key, value=stringify_value(value)))


def find_file_errors(
    data: Optional[FormDataMap],
    required_file_keys: Mapping[str, Optional[str]],
    file_messages: Mapping[str, Optional[str]],
    policy: FileCheckPolicy = FileCheckPolicy.REQUIRED,
    root_keys: Optional[Iterable[str]] = None
) -> List[ErrorDetail]:
    """
    Find missing or malformed file values in submitted data.

    Args:
        data: Original submission data, never modified
        required_file_keys: Required file keys mapped to their custom message
        file_messages: All validated file keys mapped to their custom message
        policy: Which file keys are checked
        root_keys: Keys of root-level schema components; required file keys
            among them that are absent from the top level of ``data`` are
            reported with a null value

    Returns:
        Error details in depth-first encounter order, absent keys last
    """
    collector = _FileErrorCollector(required_file_keys, file_messages, FileCheckPolicy(policy))
    data = data or {}
    collector.walk(data)

    if root_keys is not None:
        root_key_set = set(root_keys)
        for key in required_file_keys:
            if key in root_key_set and key not in data:
                collector.add_required_error(key, None)

    if collector.errors:
        logger.info(
            f"Found {len(collector.errors)} file error(s): "
            f"{[error.field for error in collector.errors]}"
        )
    return collector.errors

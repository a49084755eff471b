"""
Reconciliation of provider-reported and locally derived validation errors.

The provider's error list is filtered by the component type of each error's
field: errors without a field, and errors on component types covered by local
checks (file components, optionally date components), are dropped. The
remaining errors are merged with the local file errors into a single verdict.
"""

import logging
from typing import FrozenSet, Iterable, List, Mapping, Optional

from ..schemas.form_schemas import (
    DATE_TYPE,
    DAY_TYPE,
    ErrorDetail,
    FileType,
    RemoteValidationOutcome,
    ValidationVerdict,
)

logger = logging.getLogger(__name__)

FILE_TYPES: FrozenSet[str] = frozenset(member.value for member in FileType)
DATE_TYPES: FrozenSet[str] = frozenset({DAY_TYPE, DATE_TYPE})


def excluded_types(exclude_date_errors: bool = False) -> FrozenSet[str]:
    """Component types whose provider errors are dropped."""
    if exclude_date_errors:
        return FILE_TYPES | DATE_TYPES
    return FILE_TYPES


def filter_remote_errors(
    errors: Iterable[ErrorDetail],
    schema_type_index: Mapping[str, Optional[str]],
    exclusions: FrozenSet[str] = FILE_TYPES
) -> List[ErrorDetail]:
    """
    Drop provider errors that are not attributable or belong to excluded types.

    Fields unknown to the schema are kept.
    """
    allowed = []
    for error in errors:
        if error.field is None:
            logger.debug(f"Dropping provider error without field: {error.message}")
            continue
        if schema_type_index.get(error.field) in exclusions:
            logger.debug(f"Dropping provider error on excluded field '{error.field}'")
            continue
        allowed.append(error)
    return allowed


def merge_errors(
    remote_errors: Iterable[ErrorDetail],
    local_errors: Iterable[ErrorDetail],
    deduplicate: bool = True
) -> List[ErrorDetail]:
    """
    Concatenate provider errors and local errors, provider errors first.

    With ``deduplicate`` the first occurrence of each identical
    ``(message, field, value)`` error is kept and order is otherwise preserved.
    """
    merged = [*remote_errors, *local_errors]
    if not deduplicate:
        return merged
    return list(dict.fromkeys(merged))


def reconcile(
    remote_outcome: RemoteValidationOutcome,
    local_file_errors: List[ErrorDetail],
    schema_type_index: Mapping[str, Optional[str]],
    trace_id: Optional[str] = None,
    exclude_date_errors: bool = False,
    deduplicate: bool = True
) -> ValidationVerdict:
    """
    Combine the provider outcome and local file errors into a verdict.

    Args:
        remote_outcome: Success or rejection reported by the provider
        local_file_errors: Errors found by the file completeness check
        schema_type_index: Component keys mapped to their type
        trace_id: Correlation id copied into the error envelope
        exclude_date_errors: Also drop provider errors on day/date components
        deduplicate: Drop repeated identical errors

    Returns:
        ValidationVerdict, valid iff the merged error list is empty
    """
    if remote_outcome.accepted:
        allowed_remote: List[ErrorDetail] = []
    else:
        allowed_remote = filter_remote_errors(
            remote_outcome.errors,
            schema_type_index,
            excluded_types(exclude_date_errors)
        )
        logger.info(
            f"Provider rejected data with {len(remote_outcome.errors)} error(s), "
            f"{len(allowed_remote)} kept after filtering"
        )

    merged = merge_errors(allowed_remote, local_file_errors, deduplicate=deduplicate)
    if not merged:
        return ValidationVerdict.ok()
    return ValidationVerdict.failed(merged, trace_id)

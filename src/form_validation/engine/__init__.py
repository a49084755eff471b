"""
Validation engine: schema indexing, data transformation, file completeness
checking and error reconciliation.
"""

from .schema_indexer import SchemaIndex, index_schema
from .data_transformer import copy_and_transform, copy_form_data, convert_date, change_date_format
from .file_checker import FileCheckPolicy, find_file_errors, is_valid_file_value, is_valid_file_reference
from .error_reconciler import reconcile, filter_remote_errors, merge_errors, excluded_types

__all__ = [
    "SchemaIndex",
    "index_schema",
    "copy_and_transform",
    "copy_form_data",
    "convert_date",
    "change_date_format",
    "FileCheckPolicy",
    "find_file_errors",
    "is_valid_file_value",
    "is_valid_file_reference",
    "reconcile",
    "filter_remote_errors",
    "merge_errors",
    "excluded_types",
]

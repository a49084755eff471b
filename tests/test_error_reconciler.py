"""
Tests for error reconciliation.

Tests cover:
- Verdicts for remote success with and without local file errors
- Filtering of unattributable and excluded-type provider errors
- Type resolution when an outer and a nested component share a key
- Merge order and de-duplication
- Error envelope contents
"""

import pytest

from form_validation.engine.error_reconciler import (
    excluded_types,
    filter_remote_errors,
    merge_errors,
    reconcile,
)
from form_validation.engine.schema_indexer import index_schema
from form_validation.schemas.form_schemas import ErrorDetail, FormSchema, RemoteValidationOutcome


@pytest.fixture
def type_index():
    return {
        "name": "textfield",
        "fileName": "file",
        "latest": "fileLatest",
        "legacy": "fileLegacy",
        "dob": "day",
        "startDate": "date",
    }


@pytest.fixture
def name_error():
    return ErrorDetail(message="Name is required", field="name", value="")


@pytest.fixture
def file_error():
    return ErrorDetail(message="File is required", field="fileName", value="[]")


class TestReconcile:
    """Test reconcile verdicts."""

    def test_success_without_local_errors_is_valid(self, type_index):
        verdict = reconcile(RemoteValidationOutcome.success(), [], type_index, trace_id="t-1")

        assert verdict.valid is True
        assert verdict.error is None

    def test_success_with_local_errors(self, type_index, file_error):
        verdict = reconcile(RemoteValidationOutcome.success(), [file_error], type_index, trace_id="t-1")

        assert verdict.valid is False
        assert verdict.error.details == [file_error]
        assert verdict.error.trace_id == "t-1"
        assert verdict.error.code == "FORM_VALIDATION_ERROR"
        assert verdict.error.message == "Form validation error"

    def test_excluded_file_error_dropped(self, type_index, name_error):
        outcome = RemoteValidationOutcome.rejected([
            name_error,
            ErrorDetail(message="bad file", field="fileName", value="x"),
        ])

        verdict = reconcile(outcome, [], type_index, trace_id="t-2")

        assert verdict.valid is False
        assert len(verdict.error.details) == 1
        assert verdict.error.details[0].field == "name"

    def test_fully_absorbed_rejection_is_valid(self, type_index):
        outcome = RemoteValidationOutcome.rejected([
            ErrorDetail(message="bad file", field="fileName", value="x"),
            ErrorDetail(message="bad latest", field="latest", value="x"),
            ErrorDetail(message="bad legacy", field="legacy", value="x"),
            ErrorDetail(message="form level", field=None, value=None),
        ])

        verdict = reconcile(outcome, [], type_index)

        assert verdict.valid is True
        assert verdict.error is None

    def test_remote_errors_first_then_local(self, type_index, name_error, file_error):
        outcome = RemoteValidationOutcome.rejected([name_error])

        verdict = reconcile(outcome, [file_error], type_index, trace_id="t-3")

        assert verdict.error.details == [name_error, file_error]

    def test_date_errors_kept_by_default(self, type_index):
        dob_error = ErrorDetail(message="Invalid date", field="dob", value="02/01/2020")
        outcome = RemoteValidationOutcome.rejected([dob_error])

        verdict = reconcile(outcome, [], type_index)

        assert verdict.error.details == [dob_error]

    def test_date_errors_dropped_when_excluded(self, type_index):
        outcome = RemoteValidationOutcome.rejected([
            ErrorDetail(message="Invalid day", field="dob", value="02/01/2020"),
            ErrorDetail(message="Invalid date", field="startDate", value="x"),
        ])

        verdict = reconcile(outcome, [], type_index, exclude_date_errors=True)

        assert verdict.valid is True

    def test_duplicates_removed(self, type_index, name_error, file_error):
        outcome = RemoteValidationOutcome.rejected([name_error, name_error])

        verdict = reconcile(outcome, [file_error, file_error], type_index)

        assert verdict.error.details == [name_error, file_error]

    def test_duplicates_kept_without_dedup(self, type_index, name_error):
        outcome = RemoteValidationOutcome.rejected([name_error, name_error])

        verdict = reconcile(outcome, [], type_index, deduplicate=False)

        assert verdict.error.details == [name_error, name_error]

    def test_success_ignores_outcome_errors(self, type_index):
        verdict = reconcile(RemoteValidationOutcome.success(), [], type_index)

        assert verdict.valid is True

    def test_error_on_outer_field_kept_when_nested_file_shares_key(self):
        index = index_schema(FormSchema.model_validate({
            "components": [
                {"key": "doc", "type": "textfield"},
                {"key": "rows", "type": "editgrid", "components": [{"key": "doc", "type": "file"}]},
            ]
        }))
        doc_error = ErrorDetail(message="Doc is required", field="doc", value="")

        verdict = reconcile(RemoteValidationOutcome.rejected([doc_error]), [], index.component_types)

        assert verdict.valid is False
        assert verdict.error.details == [doc_error]


class TestFilterAndMerge:
    """Test the filtering and merge helpers."""

    def test_unknown_field_kept(self, type_index):
        error = ErrorDetail(message="Unexpected", field="notInSchema", value="1")

        assert filter_remote_errors([error], type_index) == [error]

    def test_excluded_types(self):
        assert excluded_types() == {"file", "fileLatest", "fileLegacy"}
        assert excluded_types(exclude_date_errors=True) == {"file", "fileLatest", "fileLegacy", "day", "date"}

    def test_merge_keeps_first_occurrence_order(self):
        a = ErrorDetail(message="A", field="a", value=None)
        b = ErrorDetail(message="B", field="b", value=None)
        c = ErrorDetail(message="C", field="c", value=None)

        assert merge_errors([b, a, b], [c, a]) == [b, a, c]

    def test_merge_distinguishes_values(self):
        first = ErrorDetail(message="A", field="a", value="1")
        second = ErrorDetail(message="A", field="a", value="2")

        assert merge_errors([first], [second]) == [first, second]

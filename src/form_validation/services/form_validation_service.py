"""
Form validation service.

Runs the validation pipeline for one request: fetch the schema, index it, copy
and transform the submission, check file completeness on the original
submission, dry-run validate the copy with the provider and reconcile both
error sources into a verdict.

Every request builds its own schema index and data copy; nothing is shared
between requests.
"""

import logging
from typing import Optional
from uuid import uuid4

from ..clients.form_provider_client import FormProviderClient
from ..config.settings import ValidationPolicyConfig
from ..engine.data_transformer import copy_and_transform
from ..engine.error_reconciler import reconcile
from ..engine.file_checker import find_file_errors
from ..engine.schema_indexer import index_schema
from ..exceptions import InvalidFormIdError, RemoteValidationRejected
from ..schemas.form_schemas import FormData, RemoteValidationOutcome, ValidationVerdict
from ..utils.request_logger import track_validation_request

logger = logging.getLogger(__name__)


class FormValidationService:
    """
    Validates submitted form data against provider-managed form schemas.
    """

    def __init__(self, client: FormProviderClient, policy: Optional[ValidationPolicyConfig] = None):
        """
        Initialize the service.

        Args:
            client: Form management provider client
            policy: Validation policy, defaults to ``ValidationPolicyConfig()``
        """
        self.client = client
        self.policy = policy or ValidationPolicyConfig()

    async def validate_form(
        self,
        form_id: str,
        form_data: FormData,
        trace_id: Optional[str] = None
    ) -> ValidationVerdict:
        """
        Validate a form submission.

        Args:
            form_id: Form identifier
            form_data: Submitted payload, ``data`` may be null
            trace_id: Correlation id for the error envelope, generated when absent

        Returns:
            ValidationVerdict

        Raises:
            InvalidFormIdError: If ``form_id`` is empty
            SchemaUnavailable: If the schema cannot be fetched
            CopyFailure: If the submission cannot be copied
            RemoteTransportFault: If the provider validation call fails
        """
        if not form_id or not form_id.strip():
            raise InvalidFormIdError("form_id must not be empty")
        trace_id = trace_id or uuid4().hex

        async with track_validation_request(form_id, trace_id) as request_logger:
            schema = await self.client.fetch_schema(form_id, trace_id=trace_id)
            request_logger.log_step("schema_fetched", {"components": len(schema.components)})

            index = index_schema(schema)
            request_logger.log_step("schema_indexed", {
                "day_components": len(index.day_components),
                "required_file_keys": len(index.required_file_keys),
            })

            data_copy = copy_and_transform(form_data.data, index.day_components)
            request_logger.log_step("data_transformed")

            file_errors = find_file_errors(
                form_data.data,
                index.required_file_keys,
                index.file_messages,
                policy=self.policy.file_check_policy,
                root_keys=index.root_keys,
            )
            request_logger.log_step("files_checked", {"file_errors": len(file_errors)})

            try:
                await self.client.validate(form_id, data_copy, trace_id=trace_id)
                outcome = RemoteValidationOutcome.success()
            except RemoteValidationRejected as e:
                outcome = RemoteValidationOutcome.rejected(e.errors)
            request_logger.log_step("remote_validated", {
                "accepted": outcome.accepted,
                "remote_errors": len(outcome.errors),
            })

            verdict = reconcile(
                outcome,
                file_errors,
                index.component_types,
                trace_id=trace_id,
                exclude_date_errors=self.policy.exclude_date_errors,
                deduplicate=self.policy.deduplicate_errors,
            )
            error_count = len(verdict.error.details) if verdict.error else 0
            request_logger.end(valid=verdict.valid, error_count=error_count)
            return verdict

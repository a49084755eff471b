"""
HTTP client for the form management provider.

This module wraps the two provider operations used by the validation pipeline:
fetching a form schema and dry-run validating a submission.

Features:
- Shared aiohttp session with a total request timeout
- Retry with exponential backoff for the idempotent schema fetch
- Trace id propagation to the provider
- Mapping of provider responses onto the validation exception taxonomy
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import (
    FormNotFoundError,
    RemoteTransportFault,
    RemoteValidationRejected,
    SchemaUnavailable,
)
from ..schemas.form_schemas import ErrorList, FormDataMap, FormSchema

logger = logging.getLogger(__name__)

DEFAULT_TRACE_ID_HEADER = "X-B3-TraceId"


class FormProviderClient:
    """
    Async client for the form management provider.

    The client owns its aiohttp session unless one is supplied, and should be
    closed with ``close()`` or used as an async context manager.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        max_retries: int = 3,
        retry_min_wait: float = 1.0,
        retry_max_wait: float = 10.0,
        trace_id_header: str = DEFAULT_TRACE_ID_HEADER,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize the provider client.

        Args:
            base_url: Provider base URL, form ids are appended to it
            timeout: Total timeout per request in seconds
            max_retries: Attempts for the schema fetch
            retry_min_wait: Minimum backoff between fetch attempts in seconds
            retry_max_wait: Maximum backoff between fetch attempts in seconds
            trace_id_header: Header used to forward the trace id
            session: Optional externally managed aiohttp session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait
        self.trace_id_header = trace_id_header
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, provider_config, trace_id_header: str = DEFAULT_TRACE_ID_HEADER) -> "FormProviderClient":
        """Create a client from ``FormProviderConfig`` settings."""
        return cls(
            base_url=provider_config.url,
            timeout=provider_config.timeout,
            max_retries=provider_config.max_retries,
            retry_min_wait=provider_config.retry_min_wait,
            retry_max_wait=provider_config.retry_max_wait,
            trace_id_header=trace_id_header,
        )

    async def __aenter__(self) -> "FormProviderClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("Form provider session closed")

    def _headers(self, trace_id: Optional[str]) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if trace_id:
            headers[self.trace_id_header] = trace_id
        return headers

    async def fetch_schema(self, form_id: str, trace_id: Optional[str] = None) -> FormSchema:
        """
        Fetch a form schema.

        Args:
            form_id: Form identifier
            trace_id: Correlation id forwarded to the provider

        Returns:
            Parsed FormSchema

        Raises:
            FormNotFoundError: If the provider does not know the form
            SchemaUnavailable: If the schema cannot be fetched after all retries
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=self.retry_min_wait, max=self.retry_max_wait),
            retry=(
                retry_if_exception_type(SchemaUnavailable)
                & retry_if_not_exception_type(FormNotFoundError)
            ),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                if attempt_number > 1:
                    logger.warning(f"Retrying schema fetch for form '{form_id}' (attempt {attempt_number})")
                return await self._get_form(form_id, trace_id)

    async def _get_form(self, form_id: str, trace_id: Optional[str]) -> FormSchema:
        url = f"{self.base_url}/{form_id}"
        logger.debug(f"Fetching form schema: {url}")

        try:
            async with self._get_session().get(url, headers=self._headers(trace_id)) as response:
                if response.status == 404:
                    raise FormNotFoundError(f"Form '{form_id}' not found", form_id=form_id)
                if response.status >= 400:
                    raise SchemaUnavailable(
                        f"Form provider returned {response.status} for form '{form_id}'",
                        form_id=form_id
                    )
                body = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Schema fetch for form '{form_id}' failed: {e!r}")
            raise SchemaUnavailable(f"Form provider unreachable: {e!r}", form_id=form_id) from e
        except ValueError as e:
            raise SchemaUnavailable(f"Malformed schema response for form '{form_id}'", form_id=form_id) from e

        try:
            return FormSchema.model_validate(body or {})
        except ValidationError as e:
            logger.error(f"Schema for form '{form_id}' failed to parse: {e}")
            raise SchemaUnavailable(f"Malformed schema for form '{form_id}'", form_id=form_id) from e

    async def validate(
        self,
        form_id: str,
        data: Optional[FormDataMap],
        trace_id: Optional[str] = None
    ) -> None:
        """
        Dry-run validate submission data with the provider.

        Args:
            form_id: Form identifier
            data: Transformed submission data
            trace_id: Correlation id forwarded to the provider

        Raises:
            RemoteValidationRejected: If the provider reports field errors
            RemoteTransportFault: On network errors, timeouts or unexpected statuses
        """
        url = f"{self.base_url}/{form_id}/submission"
        payload: Dict[str, Any] = {"data": data}
        logger.debug(f"Validating submission: {url}")

        try:
            async with self._get_session().post(
                url,
                params={"dryrun": "1"},
                json=payload,
                headers=self._headers(trace_id)
            ) as response:
                if response.status == 400:
                    body = await response.json(content_type=None)
                    errors = ErrorList.model_validate(body or {}).details
                    raise RemoteValidationRejected(errors)
                if response.status >= 300:
                    text = await response.text()
                    raise RemoteTransportFault(
                        f"Form provider returned {response.status}: {text[:200]}",
                        status=response.status
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Validation call for form '{form_id}' failed: {e!r}")
            raise RemoteTransportFault(f"Form provider unreachable: {e!r}") from e
        except (ValueError, ValidationError) as e:
            raise RemoteTransportFault("Malformed error response from form provider", status=400) from e

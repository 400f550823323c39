"""HTTP client for a WebCSV people service.

Sends CSV bodies with the schema they were written against and validates
what the service returns against the schema it advertises.

Example:
    from webcsv.client import WebCSVClient
    from webcsv.server.people import PEOPLE_SCHEMA

    with WebCSVClient("http://localhost:8000") as client:
        client.insert(PEOPLE_SCHEMA, [["Lovelace", "Ada", "", "36", ...]])
        schema, records = client.fetch()
"""

from __future__ import annotations

import csv
import io
import logging
from typing import List, Optional, Sequence, Tuple

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from webcsv.lib.errors import WebCSVError
from webcsv.lib.parser import parse_schema
from webcsv.lib.printer import print_schema
from webcsv.lib.schema import SchemaSpec

logger = logging.getLogger(__name__)

__all__ = ["WebCSVClient", "WebCSVRequestError"]

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class WebCSVRequestError(WebCSVError):
    """The service answered with an error."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message, details={"status_code": status_code})


def _should_retry(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


def _encode_records(records: Sequence[Sequence[str]], delimiter: str) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\n")
    writer.writerows(records)
    return buffer.getvalue().encode("utf-8")


class WebCSVClient:
    """Client for the people service.

    Args:
        base_url: Service URL
        timeout: Request timeout in seconds
        max_retries: Attempts for transport errors and retryable status codes
        backoff_factor: Multiplier for exponential backoff between attempts
        schema_header: Header carrying the schema description
        client: Pre-built httpx client (base_url is then ignored)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        schema_header: str = "Content-Schema",
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.schema_header = schema_header
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def __enter__(self) -> "WebCSVClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request(self, method: str, **kwargs) -> httpx.Response:
        @retry(
            stop=stop_after_attempt(max(self.max_retries, 1)),
            wait=wait_exponential(multiplier=self.backoff_factor, min=0, max=30),
            retry=retry_if_exception(_should_retry),
            reraise=True,
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        def do_request() -> httpx.Response:
            response = self._client.request(method, "/", **kwargs)
            if response.status_code in RETRYABLE_STATUS_CODES:
                response.raise_for_status()
            return response

        try:
            response = do_request()
        except httpx.HTTPStatusError as e:
            raise WebCSVRequestError(e.response.status_code, e.response.text) from e

        if response.status_code >= 400:
            message = response.text
            if message.startswith("ERROR,"):
                message = message[len("ERROR,") :]
            raise WebCSVRequestError(response.status_code, message)
        return response

    def _send(
        self,
        method: str,
        schema: SchemaSpec,
        records: Sequence[Sequence[str]],
        params: Optional[dict] = None,
    ) -> str:
        response = self._request(
            method,
            content=_encode_records(records, schema.delimiter),
            headers={self.schema_header: print_schema(schema), "Content-Type": "text/csv"},
            params=params,
        )
        return response.text

    def fetch(self, *, strict: bool = False) -> Tuple[SchemaSpec, List[List[str]]]:
        """Fetch all records and validate them against the advertised schema.

        Raises:
            WebCSVRequestError: If the service answers with an error
            SchemaSyntaxError: If the advertised schema cannot be parsed
            FieldValidationError: If returned records fail validation
        """
        response = self._request("GET")
        raw = response.headers.get(self.schema_header)
        if not raw:
            raise WebCSVRequestError(response.status_code, "Response carries no schema header")
        schema = parse_schema(raw)
        records = schema.validate_records(response.content, strict=strict)
        logger.debug("Fetched %d records", len(records))
        return schema, records

    def insert(self, schema: SchemaSpec, records: Sequence[Sequence[str]]) -> str:
        return self._send("POST", schema, records)

    def update(
        self,
        schema: SchemaSpec,
        record: Sequence[str],
        last_name: str,
        first_name: str,
        middle_name: str = "",
    ) -> str:
        params = {"ln": last_name, "fn": first_name, "mn": middle_name}
        return self._send("PUT", schema, [record], params=params)

    def delete(self, last_name: str, first_name: str, middle_name: str = "") -> str:
        params = {"ln": last_name, "fn": first_name, "mn": middle_name}
        return self._request("DELETE", params=params).text

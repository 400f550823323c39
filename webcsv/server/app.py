"""FastAPI application factory for the reference people service.

Clients send CSV bodies together with the schema they were written
against in the ``Content-Schema`` header. The service rejects bodies whose
schema differs from its own before looking at the data, then validates
every field. Responses are plain text ``OK,<verb>`` or ``ERROR,<reason>``.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from webcsv.lib.errors import (
    FieldValidationError,
    PayloadDecodeError,
    SchemaIncompatibleError,
    SchemaSyntaxError,
    WebCSVError,
)
from webcsv.lib.parser import parse_schema
from webcsv.lib.printer import print_schema
from webcsv.lib.settings import WebCSVSettings
from webcsv.server.people import (
    PEOPLE_SCHEMA,
    PersonStore,
    person_from_record,
    person_to_record,
)

logger = logging.getLogger(__name__)

__all__ = ["create_app", "MissingSchemaError", "RecordNotFoundError"]


class MissingSchemaError(WebCSVError):
    """Request carried no usable schema header."""


class RecordNotFoundError(WebCSVError):
    """No stored record matched the request."""


def _error(status_code: int, message: str) -> PlainTextResponse:
    return PlainTextResponse(f"ERROR,{message}", status_code=status_code)


def _render_csv(records: List[List[str]], delimiter: str) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\n")
    writer.writerows(records)
    return buffer.getvalue()


def create_app(settings: Optional[WebCSVSettings] = None) -> FastAPI:
    settings = settings or WebCSVSettings()
    store = PersonStore()

    app = FastAPI(title="WebCSV People API", version="1.0.0")
    app.state.settings = settings
    app.state.store = store

    async def read_validated_records(request: Request) -> List[List[str]]:
        raw = request.headers.get(settings.schema_header, "").strip()
        if not raw or raw.lower() == "none":
            raise MissingSchemaError("No valid schema found")

        schema = parse_schema(raw)

        mismatch = PEOPLE_SCHEMA.find_mismatch(schema)
        if mismatch is not None:
            raise SchemaIncompatibleError(mismatch)

        body = await request.body()
        return schema.validate_records(body, strict=settings.strict_types)

    @app.exception_handler(MissingSchemaError)
    def _missing_schema(request: Request, exc: MissingSchemaError) -> PlainTextResponse:
        return _error(400, exc.message)

    @app.exception_handler(SchemaSyntaxError)
    def _schema_syntax(request: Request, exc: SchemaSyntaxError) -> PlainTextResponse:
        return _error(400, f"Parse: {exc.message}")

    @app.exception_handler(SchemaIncompatibleError)
    def _schema_incompatible(request: Request, exc: SchemaIncompatibleError) -> PlainTextResponse:
        logger.info("Rejected request schema: %s", exc.mismatch)
        return _error(409, exc.message)

    @app.exception_handler(PayloadDecodeError)
    def _payload_decode(request: Request, exc: PayloadDecodeError) -> PlainTextResponse:
        return _error(400, f"Decode: {exc.message}")

    @app.exception_handler(FieldValidationError)
    def _field_validation(request: Request, exc: FieldValidationError) -> PlainTextResponse:
        return _error(422, "Data did not pass the validation against schema\n" + str(exc))

    @app.exception_handler(RecordNotFoundError)
    def _not_found(request: Request, exc: RecordNotFoundError) -> PlainTextResponse:
        return _error(404, exc.message)

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/", tags=["people"])
    def list_people() -> Response:
        records = [person_to_record(p) for p in store.snapshot()]
        return Response(
            content=_render_csv(records, PEOPLE_SCHEMA.delimiter),
            media_type="text/csv",
            headers={settings.schema_header: print_schema(PEOPLE_SCHEMA)},
        )

    @app.post("/", tags=["people"])
    async def insert_people(request: Request) -> PlainTextResponse:
        records = await read_validated_records(request)
        added = store.insert([person_from_record(r) for r in records])
        logger.info("Inserted %d people", added)
        return PlainTextResponse("OK,Insert")

    @app.put("/", tags=["people"])
    async def update_person(
        request: Request, ln: str = "", fn: str = "", mn: str = ""
    ) -> PlainTextResponse:
        records = await read_validated_records(request)
        if not records:
            raise PayloadDecodeError("Update requires one record")
        if not store.update(ln, fn, mn, person_from_record(records[0])):
            raise RecordNotFoundError(f"No record for {ln},{fn},{mn}")
        return PlainTextResponse("OK,Update")

    @app.delete("/", tags=["people"])
    def delete_people(ln: str = "", fn: str = "", mn: str = "") -> PlainTextResponse:
        removed = store.delete(ln, fn, mn)
        logger.info("Deleted %d people", removed)
        return PlainTextResponse("OK,Delete")

    return app

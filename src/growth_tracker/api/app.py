"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from growth_tracker.api.models import (
    GenerateReportRequest,
    RecordWeightRequest,
    RenameReportRequest,
)
from growth_tracker.app_logging import configure_logging
from growth_tracker.containers import AppContainer
from growth_tracker.domain.animals import WeightObservation
from growth_tracker.domain.reports import ReportRecord
from growth_tracker.domain.results import ErrorKind, Ok, Result

_STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_UPSTREAM_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.UPSTREAM_FAILURE: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def invalid_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected malformed request to %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "kind": str(ErrorKind.INVALID_INPUT),
                    "message": "Malformed request body or parameters.",
                }
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/animals")
    async def list_animals(
        request: Request, x_owner_id: str | None = Header(default=None)
    ) -> JSONResponse:
        """List animals with weight records."""
        actions = _container(request).actions
        return _respond(actions.list_animals(x_owner_id))

    @app.get("/animals/{animal_id}/weights")
    async def get_weights(
        animal_id: str,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Return an animal's weight observations."""
        actions = _container(request).actions
        return _respond(
            actions.get_weights(x_owner_id, animal_id),
            lambda items: [_serialize_observation(item) for item in items],
        )

    @app.post("/animals/{animal_id}/weights")
    async def record_weight(
        animal_id: str,
        body: RecordWeightRequest,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Record a weight observation."""
        actions = _container(request).actions
        return _respond(
            actions.record_observation(
                x_owner_id, animal_id, body.date, body.weight, body.notes
            ),
            _serialize_observation,
        )

    @app.delete("/animals/{animal_id}/weights")
    async def remove_weight(
        animal_id: str,
        request: Request,
        date: str | None = None,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Remove every observation recorded at the given timestamp."""
        actions = _container(request).actions
        return _respond(
            actions.remove_observation(x_owner_id, animal_id, date),
            lambda removed: {"removed": removed},
        )

    @app.delete("/animals/{animal_id}")
    async def delete_animal(
        animal_id: str,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Delete an animal and clean up its reports."""
        actions = _container(request).actions
        return _respond(actions.delete_animal(x_owner_id, animal_id))

    @app.get("/reports")
    async def list_reports(
        request: Request, x_owner_id: str | None = Header(default=None)
    ) -> JSONResponse:
        """List the owner's reports."""
        actions = _container(request).actions
        return _respond(
            actions.list_reports(x_owner_id),
            lambda reports: [report.to_document() for report in reports],
        )

    @app.post("/reports")
    async def generate_report(
        body: GenerateReportRequest,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Merge an animal's growth into a named report."""
        actions = _container(request).actions
        return _respond(
            actions.generate_report(
                x_owner_id,
                body.animal_id,
                body.start_date,
                body.end_date,
                body.report_name,
            ),
            ReportRecord.to_document,
        )

    @app.get("/reports/{report_name}")
    async def get_report(
        report_name: str,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Return a report by name."""
        actions = _container(request).actions
        return _respond(
            actions.get_report(x_owner_id, report_name), ReportRecord.to_document
        )

    @app.post("/reports/{report_name}/rename")
    async def rename_report(
        report_name: str,
        body: RenameReportRequest,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Rename a report."""
        actions = _container(request).actions
        return _respond(actions.rename_report(x_owner_id, report_name, body.new_name))

    @app.delete("/reports/{report_name}")
    async def delete_report(
        report_name: str,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Delete a report."""
        actions = _container(request).actions
        return _respond(actions.delete_report(x_owner_id, report_name))

    @app.get("/reports/{report_name}/summary")
    async def get_or_create_summary(
        report_name: str,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Return the cached AI summary, generating it on first request."""
        actions = _container(request).actions
        result = await actions.get_or_create_summary(x_owner_id, report_name)
        return _respond(result, lambda summary: {"summary": summary})

    @app.post("/reports/{report_name}/summary")
    async def regenerate_summary(
        report_name: str,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Force a new AI classification of the report."""
        actions = _container(request).actions
        result = await actions.classify(x_owner_id, report_name)
        return _respond(result, lambda summary: {"summary": summary})

    @app.get("/reports/{report_name}/summary/cached")
    async def cached_summary(
        report_name: str,
        request: Request,
        x_owner_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Return the stored summary without contacting the model."""
        actions = _container(request).actions
        return _respond(
            actions.get_summary(x_owner_id, report_name),
            lambda summary: {"summary": summary},
        )

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _respond(
    result: Result, serialize: Callable[[Any], object] | None = None
) -> JSONResponse:
    """Render a tagged result with a status code matching its error kind."""
    if isinstance(result, Ok):
        value = serialize(result.value) if serialize else result.value
        return JSONResponse(status_code=status.HTTP_200_OK, content={"ok": value})
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(
            result.error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
        content=result.to_payload(),
    )


def _serialize_observation(observation: WeightObservation) -> dict[str, object]:
    return {
        "date": observation.date.isoformat(),
        "weight": observation.weight,
        "notes": observation.notes,
    }

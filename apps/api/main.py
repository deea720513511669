"""FastAPI entrypoint for the Airtable random delete service."""
from __future__ import annotations

import random
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lib.airtable_client import AirtableRecordClient
from lib.config import Settings, load_settings
from services.random_delete.run import (
    ClientFactory,
    delete_random_record,
    list_records,
    utc_timestamp,
)
from utils.errors import (
    AirtableAccessError,
    AirtableAuthError,
    AirtableError,
    ConfigError,
    NoRecordsError,
    RandomDeleteError,
    TableNotFoundError,
)
from utils.logging import get_logger, log_error, set_log_level

logger = get_logger(__name__)

SERVICE_NAME = "airtable-random-delete"
SERVICE_VERSION = "1.0.0"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client_factory() -> ClientFactory:
    return AirtableRecordClient.from_settings


def get_rng() -> Optional[random.Random]:
    """Random source for record selection; None uses the module-level generator."""
    return None


def register_error_handlers(app: FastAPI) -> None:
    """Map service exceptions onto the JSON error bodies of /delete-random."""

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        logger.error("Configuration error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(NoRecordsError)
    async def no_records_handler(request: Request, exc: NoRecordsError) -> JSONResponse:
        logger.warning("No records found in table %s", exc.table)
        return JSONResponse(
            status_code=404,
            content={"error": "No records found in the table", "table": exc.table},
        )

    @app.exception_handler(AirtableError)
    async def airtable_error_handler(request: Request, exc: AirtableError) -> JSONResponse:
        # Already logged with table context by the client.
        table = request.app.state.settings.table_name

        if isinstance(exc, AirtableAuthError):
            return JSONResponse(
                status_code=401,
                content={
                    "error": "Authentication failed. Check your Airtable Personal Access Token.",
                    "details": "Ensure your token has data.records:read and data.records:write permissions",
                },
            )
        if isinstance(exc, AirtableAccessError):
            return JSONResponse(
                status_code=403,
                content={
                    "error": "Access denied. Check your token permissions and base access.",
                    "details": "Ensure your token has access to this specific base and the required scopes",
                },
            )
        if isinstance(exc, TableNotFoundError):
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Table not found",
                    "table": table,
                    "details": "Check that the table name is correct and exists in your base",
                },
            )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to delete random record",
                "details": exc.details,
                "timestamp": utc_timestamp(),
            },
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application around an explicit Settings value."""
    settings = settings or load_settings()
    set_log_level(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Airtable Random Delete service running on port %s", settings.port)
        logger.info("Table: %s", settings.table_name)
        logger.info("Base ID: %s", "Set" if settings.airtable_base_id else "Missing")
        logger.info("Token: %s", "Set" if settings.airtable_token else "Missing")
        yield
        logger.info("Shutting down gracefully")

    app = FastAPI(title="Airtable Random Delete", version=SERVICE_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/healthz")
    def health_check() -> dict:
        return {"status": "healthy", "timestamp": utc_timestamp()}

    @app.get("/version")
    def version() -> dict:
        return {"version": SERVICE_VERSION, "service": SERVICE_NAME}

    @app.get("/records")
    def records(
        settings: Settings = Depends(get_settings),
        client_factory: ClientFactory = Depends(get_client_factory),
    ):
        """List up to five records for testing; never deletes anything."""
        if not settings.has_credentials:
            logger.error("Missing required environment variables for /records")
            return JSONResponse(status_code=500, content={"error": "Missing required environment variables"})
        try:
            return list_records(settings, client_factory)
        except AirtableError as exc:
            details = exc.details
        except Exception as exc:
            log_error("GET /records", exc, {"table": settings.table_name})
            details = str(exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch records", "details": details},
        )

    @app.post("/delete-random")
    def delete_random(
        settings: Settings = Depends(get_settings),
        client_factory: ClientFactory = Depends(get_client_factory),
        rng: Optional[random.Random] = Depends(get_rng),
    ) -> dict:
        try:
            return delete_random_record(settings, client_factory, rng)
        except RandomDeleteError:
            raise
        except Exception as exc:
            log_error("POST /delete-random", exc, {"table": settings.table_name})
            raise AirtableError(str(exc)) from exc

    return app


app = create_app()


def main() -> None:
    settings = app.state.settings
    # uvicorn drains in-flight requests on SIGINT/SIGTERM before exiting.
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

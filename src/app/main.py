"""Definition of FastAPI based web service."""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.routing import Match

import constants
import metrics
import version
from app import routers
from app.database import create_tables, dispose_database, initialize_database
from app.state import app_state
from client import AsyncLlamaStackClientHolder
from configuration import configuration
from log import get_logger
from models.responses import InvalidInputResponse

logger = get_logger(__name__)

logger.info("Initializing app")


def config_file_path() -> str:
    """Return path to configuration file handed over by the entry point."""
    return os.environ.get(constants.CONFIG_PATH_ENV_VAR, constants.DEFAULT_CONFIG_FILE)


# Uvicorn workers are separate processes that need to load configuration again
if not configuration.is_loaded():
    configuration.load_configuration(config_file_path())

service_name = configuration.configuration.name


async def startup() -> None:
    """Load configuration and initialize process-wide resources.

    Configuration and database are required, the service can not work
    without them. The model client is optional: without it accounts can be
    managed, only model invocations are rejected as unavailable.
    """
    try:
        configuration.load_configuration(config_file_path())
    except Exception as e:
        app_state.mark_check_complete("configuration_loaded", False, str(e))
        raise
    app_state.mark_check_complete("configuration_loaded", True)

    try:
        initialize_database()
        create_tables()
    except Exception as e:
        app_state.mark_check_complete("database_initialized", False, str(e))
        raise
    app_state.mark_check_complete("database_initialized", True)

    try:
        await AsyncLlamaStackClientHolder().load(configuration.llama_stack_configuration)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Unable to initialize Llama Stack client: %s", e)
        app_state.mark_check_complete("llama_client_initialized", False, str(e))
    else:
        app_state.mark_check_complete("llama_client_initialized", True)

    app_state.mark_initialization_complete()
    logger.info("App startup complete")


# running on FastAPI startup
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """
    Initialize app resources.

    FastAPI lifespan context: initializes configuration, database and Llama
    client before serving requests and releases database connections after.
    """
    await startup()

    yield

    dispose_database()
    app_state.reset()


app = FastAPI(
    title=f"{service_name} service - OpenAPI",
    summary=f"{service_name} service API specification.",
    description=f"{service_name} service API specification.",
    version=version.__version__,
    license_info={
        "name": "Apache 2.0",
        "url": "https://www.apache.org/licenses/LICENSE-2.0.html",
    },
    servers=[
        {"url": "http://localhost:8080/", "description": "Locally running service"}
    ],
    lifespan=lifespan,
)

cors = configuration.service_configuration.cors

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.allow_origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request body as invalid input."""
    cause = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.info("Invalid request: %s", cause)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": InvalidInputResponse(cause=cause).dump_detail()},
    )


def matching_route_path(request: Request) -> str | None:
    """Return path template of the route handling the request, if any."""
    for route in app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", None)
    return None


@app.middleware("http")
async def rest_api_metrics(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Middleware with REST API counter update logic."""
    path = request.url.path
    logger.debug("Received request for path: %s", path)

    # ignore paths that are not part of the app routes
    route_path = matching_route_path(request)
    if route_path is None:
        return await call_next(request)

    logger.debug("Processing API request for route: %s", route_path)

    # measure time to handle duration + update histogram
    with metrics.response_duration_seconds.labels(route_path).time():
        response = await call_next(request)

    # ignore /metrics endpoint that will be called periodically
    if not route_path.endswith("/metrics"):
        # just update metrics
        metrics.rest_api_calls_total.labels(route_path, response.status_code).inc()
    return response


logger.info("Including routers")
routers.include_routers(app)

"""FastAPI application factory for stateless request/response services."""

import inspect
import logging
from dataclasses import dataclass

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from .errors import ServiceError
from .models import ErrorResponse, HealthResponse
from .processor import BaseProcessor, StatelessAction

logger = logging.getLogger(__name__)


@dataclass
class ServiceConfig:
    """
    Configuration for building a stateless service application.

    Args:
        name: Override service name (defaults to processor.name)
        version: Override service version (defaults to processor.version)
        description: Short description for generated docs
        index_text: Plain-text body for GET /; the health model is served when unset
    """

    name: str | None = None
    version: str | None = None
    description: str | None = None
    index_text: str | None = None


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def _render(action: StatelessAction, call_result):
    if inspect.isawaitable(call_result):
        call_result = await call_result
    if isinstance(call_result, Response):
        return call_result
    if action.media_type and isinstance(call_result, (bytes, bytearray, memoryview)):
        return Response(content=bytes(call_result), media_type=action.media_type)
    return call_result


def make_endpoint(action: StatelessAction):
    """Build a FastAPI endpoint whose signature matches the action's models."""
    QueryModel = action.query_model
    RequestModel = action.request_model

    if QueryModel and RequestModel:
        async def endpoint(request: Request, payload: RequestModel):
            query = QueryModel(**request.query_params)
            return await _render(action, action.handler(query, payload))
    elif QueryModel:
        async def endpoint(request: Request):
            query = QueryModel(**request.query_params)
            return await _render(action, action.handler(query))
    elif RequestModel:
        async def endpoint(payload: RequestModel):
            return await _render(action, action.handler(payload))
    else:
        async def endpoint():
            return await _render(action, action.handler())

    return endpoint


def create_app(processor: BaseProcessor, config: ServiceConfig | None = None) -> FastAPI:
    """
    Create a FastAPI application for a stateless processor.

    Args:
        processor: The processor instance implementing business logic
        config: Optional service configuration
    """

    config = config or ServiceConfig()
    configure_logging()

    service_name = config.name or processor.name
    service_version = config.version or processor.version
    service_description = config.description or f"{service_name} stateless API"

    app = FastAPI(
        title=f"{service_name.title()} Stateless API",
        description=service_description,
        version=service_version,
    )

    app.state.processor = processor
    app.state.service_config = config

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError):
        """Handle Pydantic validation errors (e.g., query parameter validation)."""
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "detail": str(exc)},
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    if config.index_text is not None:
        @app.get("/", response_class=PlainTextResponse)
        async def index():
            return config.index_text
    else:
        @app.get("/", response_model=HealthResponse)
        async def root():
            return HealthResponse(status="healthy", version=service_version)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse(status="healthy", version=service_version)

    actions = processor.get_stateless_actions()
    if not actions:
        logger.warning(
            "Processor %s registered with stateless service but get_stateless_actions() returned nothing.",
            processor.name,
        )

    for action in actions:
        logger.info("Registering stateless action '%s' at %s", action.name, action.path)

        endpoint = make_endpoint(action)

        route_kwargs = {
            "methods": list(action.methods),
            "response_model": action.response_model,
            "summary": action.summary,
            "description": action.description,
            "tags": list(action.tags) if action.tags else None,
            "responses": {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        }
        route_kwargs = {k: v for k, v in route_kwargs.items() if v is not None}

        app.api_route(action.path, **route_kwargs)(endpoint)

    return app

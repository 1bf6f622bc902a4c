import logging
from textwrap import dedent
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from assets_api.adapters.metadata_store import MetadataStore
from assets_api.adapters.object_store import ObjectStore
from assets_api.errors import (
    AssetsApiError,
    handle_assets_api_errors,
    handle_broad_exceptions,
    handle_request_validation_errors,
)
from assets_api.routers.files import router as files_router
from assets_api.routers.health import router as health_router
from assets_api.settings import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Set up logging
logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once per process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # boto is chatty at INFO
    logging.getLogger("botocore").setLevel(logging.WARNING)


def create_app(
    settings: Optional[Settings] = None,
    object_store: Optional[ObjectStore] = None,
    metadata_store: Optional[MetadataStore] = None,
) -> FastAPI:
    """
    Create a FastAPI application.

    The gateways default to boto3-backed instances built from ``settings``;
    pass your own to substitute fakes or pre-configured clients.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Assets API",
        summary="Upload files and keep their metadata",
        version="v1",
        description=dedent(
            """\
        | Route | Notes |
        | --- | --- |
        | `POST /files` | multipart upload, `file` is required |
        | `GET /files/{id}?visibility=` | `visibility` is the partition key |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.object_store = object_store or ObjectStore.from_settings(settings)
    app.state.metadata_store = metadata_store or MetadataStore.from_settings(settings)
    logger.info(
        f"Assets API configured: bucket={settings.blob_container_name}, "
        f"table={settings.metadata_table_name}, mode={settings.deployment_mode}"
    )

    app.include_router(health_router, tags=["health"])
    app.include_router(files_router, tags=["files"])

    app.add_exception_handler(
        exc_class_or_status_code=AssetsApiError,
        handler=handle_assets_api_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    app = create_app(settings)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

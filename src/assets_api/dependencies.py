"""FastAPI dependencies that hand the per-app gateways and settings to the routers."""

from fastapi import Request

from assets_api.adapters.metadata_store import MetadataStore
from assets_api.adapters.object_store import ObjectStore
from assets_api.settings import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_object_store(request: Request) -> ObjectStore:
    return request.app.state.object_store


def get_metadata_store(request: Request) -> MetadataStore:
    return request.app.state.metadata_store

"""boto3 client construction shared by the S3 and DynamoDB gateways."""

import logging
from typing import Any, Dict

import boto3

from assets_api.settings import Settings

logger = logging.getLogger(__name__)


def _client_kwargs(settings: Settings) -> Dict[str, Any]:
    client_kwargs: Dict[str, Any] = {
        "region_name": settings.aws_region,
    }
    if settings.aws_access_key_id:
        client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    if settings.aws_endpoint_url:
        client_kwargs["endpoint_url"] = settings.aws_endpoint_url
    return client_kwargs


def get_s3_client(settings: Settings) -> Any:
    """Create an S3 client configured from settings."""
    logger.debug(f"Creating s3 client (mode={settings.deployment_mode}, endpoint={settings.aws_endpoint_url})")
    return boto3.client("s3", **_client_kwargs(settings))


def get_dynamodb_resource(settings: Settings) -> Any:
    """Create a DynamoDB service resource configured from settings."""
    logger.debug(f"Creating dynamodb resource (mode={settings.deployment_mode}, endpoint={settings.aws_endpoint_url})")
    return boto3.resource("dynamodb", **_client_kwargs(settings))

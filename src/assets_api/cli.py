# cli.py
import logging

import click

from assets_api.adapters.metadata_store import MetadataStore
from assets_api.adapters.object_store import ObjectStore
from assets_api.main import configure_logging
from assets_api.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the Assets API"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  Deployment Mode: {settings.deployment_mode}")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  S3 Bucket: {settings.blob_container_name}")
    click.echo(f"  DynamoDB Table: {settings.metadata_table_name}")
    click.echo(f"  Max Upload Bytes: {settings.max_upload_bytes}")
    click.echo(f"  Port: {settings.port}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
def init_resources():
    """Create the S3 bucket and the DynamoDB table if they do not exist"""
    settings = get_settings()
    configure_logging(settings.log_level)

    ObjectStore.from_settings(settings).create_container_if_absent()
    click.echo(f"Bucket ready: {settings.blob_container_name}")

    created = MetadataStore.from_settings(settings).create_table_if_absent()
    state = "created" if created else "already exists"
    click.echo(f"Table {state}: {settings.metadata_table_name}")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")
@click.option("--port", type=int, default=None, help="Port to listen on (defaults to the PORT setting)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development only)")
def serve(host, port, reload):
    """Run the API with uvicorn"""
    import uvicorn

    settings = get_settings()
    port = port or settings.port
    logger.info(f"Starting Assets API on {host}:{port}")
    uvicorn.run(
        "assets_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()

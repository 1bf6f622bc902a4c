"""Object store gateway: raw file bytes in an S3 bucket, addressed by blob name."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from botocore.exceptions import BotoCoreError, ClientError

from assets_api.aws_clients import get_s3_client
from assets_api.errors import DependencyError
from assets_api.s3.buckets import create_bucket_if_absent
from assets_api.s3.delete_objects import delete_s3_object
from assets_api.s3.urls import object_url
from assets_api.s3.write_objects import upload_s3_object
from assets_api.settings import Settings
from assets_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)


@contextmanager
def _translate_s3_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (BotoCoreError, ClientError) as e:
        logger.error(f"S3 {operation} failed: {str(e)}")
        raise DependencyError(str(e)) from e


class ObjectStore:
    """Thin wrapper around one S3 bucket. No retries, no multipart uploads."""

    def __init__(
        self,
        s3_client: Any,
        bucket_name: str,
        region: str,
        endpoint_url: Optional[str] = None,
    ):
        self.s3_client = s3_client
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "ObjectStore":
        return cls(
            s3_client=get_s3_client(settings),
            bucket_name=settings.blob_container_name,
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        )

    @log_execution_time
    def create_container_if_absent(self) -> None:
        with _translate_s3_errors("create_bucket"):
            created = create_bucket_if_absent(self.bucket_name, self.s3_client, region=self.region)
        if created:
            logger.info(f"Created S3 bucket: {self.bucket_name}")

    @log_execution_time
    def write_blob(self, name: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store ``data`` under ``name`` and return the object's URL."""
        with _translate_s3_errors("put_object"):
            upload_s3_object(
                bucket_name=self.bucket_name,
                object_key=name,
                file_content=data,
                s3_client=self.s3_client,
                content_type=content_type,
            )
        logger.info(f"Uploaded {len(data)} bytes to s3://{self.bucket_name}/{name}")
        return object_url(self.bucket_name, name, self.region, self.endpoint_url)

    @log_execution_time
    def delete_blob_if_exists(self, name: str) -> None:
        with _translate_s3_errors("delete_object"):
            delete_s3_object(self.bucket_name, name, self.s3_client)
        logger.info(f"Deleted s3://{self.bucket_name}/{name}")

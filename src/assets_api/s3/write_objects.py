"""Functions for writing objects to an S3 bucket--the "C" in CRUD."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def upload_s3_object(
    bucket_name: str,
    object_key: str,
    file_content: bytes,
    s3_client: "S3Client",
    content_type: Optional[str] = None,
) -> None:
    """
    Upload a file to an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param file_content: The content of the file to upload.
    :param s3_client: A boto3 S3 client.
    :param content_type: The MIME type of the file, e.g. "text/plain" for a text file.
    """
    content_type = content_type or "application/octet-stream"
    s3_client.put_object(
        Bucket=bucket_name,
        Key=object_key,
        Body=file_content,
        ContentType=content_type,
    )

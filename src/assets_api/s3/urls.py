"""Build the address of an object from the bucket, key and client configuration."""

from typing import Optional
from urllib.parse import quote


def object_url(
    bucket_name: str,
    object_key: str,
    region: str,
    endpoint_url: Optional[str] = None,
) -> str:
    """
    Path-style URL against a custom endpoint, virtual-hosted style against AWS.

    >>> object_url("uploads", "abc-notes.pdf", "us-east-1")
    'https://uploads.s3.us-east-1.amazonaws.com/abc-notes.pdf'
    >>> object_url("uploads", "abc-notes.pdf", "us-east-1", "http://localhost:5000/")
    'http://localhost:5000/uploads/abc-notes.pdf'
    """
    key = quote(object_key)
    if endpoint_url:
        return f"{endpoint_url.rstrip('/')}/{bucket_name}/{key}"
    return f"https://{bucket_name}.s3.{region}.amazonaws.com/{key}"

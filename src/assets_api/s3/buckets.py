"""Functions for managing the S3 bucket that holds uploaded files."""

from typing import TYPE_CHECKING, Optional

from botocore.exceptions import ClientError

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def create_bucket_if_absent(
    bucket_name: str,
    s3_client: "S3Client",
    region: Optional[str] = None,
) -> bool:
    """
    Create an S3 bucket unless it already exists and belongs to us.

    :param bucket_name: The name of the S3 bucket.
    :param s3_client: A boto3 S3 client.
    :param region: The bucket's region. ``us-east-1`` must not be sent as a location constraint.
    :return: True if the bucket was created by this call.
    """
    # us-east-1 answers create_bucket with success for a bucket we already own
    try:
        s3_client.head_bucket(Bucket=bucket_name)
        return False
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") not in ("404", "NoSuchBucket"):
            raise

    create_kwargs = {"Bucket": bucket_name}
    if region and region != "us-east-1":
        create_kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
    try:
        s3_client.create_bucket(**create_kwargs)
    except ClientError as e:
        # another request created it between the head and the create
        if e.response.get("Error", {}).get("Code") == "BucketAlreadyOwnedByYou":
            return False
        raise
    return True
